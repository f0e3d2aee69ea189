"""Names, labels and defaults shared across the operator."""

OPERATOR_NAME = "jenkins-operator"
DEFAULT_AMOUNT_OF_EXECUTORS = 0
SEED_JOB_SUFFIX = "job-dsl-seed"
DEFAULT_JENKINS_MASTER_IMAGE = "jenkins/jenkins:2.263.2-lts-alpine"
DEFAULT_HTTP_PORT = 8080
DEFAULT_SLAVE_PORT = 50000
JAVA_OPTS_VARIABLE_NAME = "JAVA_OPTS"

LABEL_APP_KEY = "app"
LABEL_APP_VALUE = OPERATOR_NAME
LABEL_WATCH_KEY = "watch"
LABEL_WATCH_VALUE = "true"
LABEL_JENKINS_CR_KEY = "jenkins-cr"