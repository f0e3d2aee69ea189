"""Groovy script execution via Jenkins, tracking applied scripts in the resource status."""

from __future__ import annotations

import base64
import hashlib
import logging
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from typing import Protocol, Union

from . import log


@dataclass
class ConfigMapRef:
    name: str


@dataclass
class SecretRef:
    name: str = ""


@dataclass
class Customization:
    secret: SecretRef = field(default_factory=SecretRef)
    configurations: list[ConfigMapRef] = field(default_factory=list)


@dataclass
class AppliedGroovyScript:
    configuration_type: str
    source: str
    name: str
    hash: str


@dataclass
class JenkinsSpec:
    groovy_scripts: Customization = field(default_factory=Customization)
    configuration_as_code: Customization = field(default_factory=Customization)


@dataclass
class JenkinsStatus:
    applied_groovy_scripts: list[AppliedGroovyScript] = field(default_factory=list)


@dataclass
class Jenkins:
    name: str = ""
    namespace: str = ""
    spec: JenkinsSpec = field(default_factory=JenkinsSpec)
    status: JenkinsStatus = field(default_factory=JenkinsStatus)


@dataclass
class Secret:
    name: str
    namespace: str = ""
    data: dict[str, bytes] = field(default_factory=dict)


@dataclass
class ConfigMap:
    name: str
    namespace: str = ""
    data: dict[str, str] = field(default_factory=dict)


class GroovyScriptExecutionFailed(Exception):
    """A Groovy script failed on the Jenkins side."""

    def __init__(self, logs: str = "", configuration_type: str = "", source: str = "", name: str = "") -> None:
        super().__init__()
        self.logs = logs
        self.configuration_type = configuration_type
        self.source = source
        self.name = name

    def __str__(self) -> str:
        return (
            f"{self.configuration_type} Source '{self.source}' Name '{self.name}' "
            f"groovy script execution failed, logs: {self.logs}"
        )


class JenkinsClient(Protocol):
    def execute_script(self, script: str) -> str:
        """Run a script and return its logs; raise GroovyScriptExecutionFailed on failure."""
        ...


class KubernetesClient(Protocol):
    def get_secret(self, namespace: str, name: str) -> Secret:
        """Return the secret; raise LookupError if it does not exist."""
        ...

    def get_config_map(self, namespace: str, name: str) -> ConfigMap:
        """Return the config map; raise LookupError if it does not exist."""
        ...

    def update_status(self, jenkins: Jenkins) -> None:
        """Persist the status of the Jenkins resource."""
        ...


def calculate_hash(data: Mapping[str, Union[str, bytes]]) -> str:
    """Base64 SHA-256 over keys and values, taken in sorted key order."""
    digest = hashlib.sha256()
    for key in sorted(data):
        value = data[key]
        digest.update(key.encode("utf-8"))
        digest.update(value if isinstance(value, bytes) else value.encode("utf-8"))
    return base64.b64encode(digest.digest()).decode("ascii")


_IMPORT_PREFIX = "import "

_SECRETS_LOADER_SCRIPT_FMT = """def secretsPath = '%s'
def secrets = [:]
"ls ${secretsPath}".execute().text.eachLine {secrets[it] = new File("${secretsPath}/${it}").text}"""

_SYNCHRONIZE_SECRETS_SCRIPT_FMT = """
def secretsPath = '%s'
def expectedHash = '%s'

println "Synchronizing Kubernetes Secret to the Jenkins master pod, timeout 60 seconds."

def complete = false
for(int i = 1; i <= 30; i++) {
    def fileList = "ls ${secretsPath}".execute()
    def secrets = []
    fileList .text.eachLine {secrets.add(it)}
    println "Mounted secrets: ${secrets}"
    def actualHash = calculateHash((String[])secrets, secretsPath)
    println "Expected hash '${expectedHash}', actual hash '${actualHash}', will retry"
    if(expectedHash == actualHash) {
        complete = true
        break
    }
    sleep 2000
}
if(!complete) {
    throw new Exception("Timeout while synchronizing files")
}

def calculateHash(String[] secrets, String secretsPath) {
    def hash = java.security.MessageDigest.getInstance("SHA-256")
    for(secret in secrets) {
        hash.update(secret.getBytes())
        def fileLocation = java.nio.file.Paths.get("${secretsPath}/${secret}")
        def fileData = java.nio.file.Files.readAllBytes(fileLocation)
        hash.update(fileData)
    }
    return Base64.getEncoder().encodeToString(hash.digest())
}
"""

_SYNCHRONIZING_SECRET_SCRIPT_NAME = "synchronizing-secret.groovy"


def add_secrets_loader_to_groovy_script(secrets_path: str) -> Callable[[str], str]:
    """Return a function that inserts the secrets loader after a script's imports."""
    loader = _SECRETS_LOADER_SCRIPT_FMT % secrets_path

    def update(groovy_script: str) -> str:
        if not groovy_script.startswith(_IMPORT_PREFIX):
            return loader + groovy_script
        lines = groovy_script.split("\n")
        split_at = next(
            (i for i, line in enumerate(lines) if not line.startswith(_IMPORT_PREFIX)),
            len(lines),
        )
        return "\n".join(lines[:split_at]) + "\n\n" + loader + "\n\n" + "\n".join(lines[split_at:])

    return update


class Groovy:
    """Runs Groovy scripts from a customization and records them in the Jenkins status."""

    def __init__(
        self,
        jenkins_client: JenkinsClient,
        k8s_client: KubernetesClient,
        jenkins: Jenkins,
        configuration_type: str,
        customization: Customization,
    ) -> None:
        self.jenkins_client = jenkins_client
        self.k8s_client = k8s_client
        self.jenkins = jenkins
        self.configuration_type = configuration_type
        self.customization = customization
        self._logger = logging.LoggerAdapter(log.get_logger(), {"cr": jenkins.name})

    def ensure_single(self, source: str, name: str, hash_value: str, groovy_script: str) -> bool:
        """Run one script unless already applied; return True when it was run."""
        if self.is_groovy_script_already_applied(source, name, hash_value):
            return False

        try:
            self.jenkins_client.execute_script(groovy_script)
        except GroovyScriptExecutionFailed as error:
            error.configuration_type = self.configuration_type
            error.name = name
            error.source = source
            self._logger.warning(
                "%s Source '%s' Name '%s' groovy script execution failed, logs :\n%s",
                self.configuration_type, source, name, error.logs,
            )
            raise

        applied = [
            script
            for script in self.jenkins.status.applied_groovy_scripts
            if not (
                script.configuration_type == self.configuration_type
                and script.source == source
                and script.name == name
            )
        ]
        applied.append(AppliedGroovyScript(self.configuration_type, source, name, hash_value))
        self.jenkins.status.applied_groovy_scripts = applied

        self.k8s_client.update_status(self.jenkins)
        return True

    def wait_for_secret_synchronization(self, secrets_path: str) -> bool:
        """Run a script that waits until the secret is mounted in the pod."""
        secret_name = self.customization.secret.name
        if not secret_name:
            return False

        secret = self.k8s_client.get_secret(self.jenkins.namespace, secret_name)
        hash_value = calculate_hash(secret.data)

        if self.is_groovy_script_already_applied(secret_name, _SYNCHRONIZING_SECRET_SCRIPT_NAME, hash_value):
            return False

        self._logger.info("%s Secret '%s' running synchronization", self.configuration_type, secret.name)
        return self.ensure_single(
            secret_name,
            _SYNCHRONIZING_SECRET_SCRIPT_NAME,
            hash_value,
            _SYNCHRONIZE_SECRETS_SCRIPT_FMT % (secrets_path, hash_value),
        )

    def ensure(
        self,
        name_filter: Callable[[str], bool],
        update_groovy_script: Callable[[str], str],
    ) -> bool:
        """Run every selected script from the configured config maps; True means requeue."""
        secret_data: dict[str, bytes] = {}
        if self.customization.secret.name:
            secret_data = dict(
                self.k8s_client.get_secret(self.jenkins.namespace, self.customization.secret.name).data
            )

        for ref in self.customization.configurations:
            config_map = self.k8s_client.get_config_map(self.jenkins.namespace, ref.name)
            for name in sorted(config_map.data):
                groovy_script = update_groovy_script(config_map.data[name])
                if not name_filter(name):
                    self._logger.debug(
                        "Skipping %s ConfigMap '%s' name '%s'", self.configuration_type, config_map.name, name
                    )
                    continue

                hash_value = calculate_hash({**secret_data, name: groovy_script})
                if self.is_groovy_script_already_applied(config_map.name, name, hash_value):
                    continue

                self._logger.info(
                    "%s ConfigMap '%s' name '%s' running groovy script",
                    self.configuration_type, config_map.name, name,
                )
                if self.ensure_single(config_map.name, name, hash_value, groovy_script):
                    return True

        return False

    def is_groovy_script_already_applied(self, source: str, name: str, hash_value: str) -> bool:
        """Whether this exact script version is recorded as applied."""
        return any(
            script.configuration_type == self.configuration_type
            and script.hash == hash_value
            and script.name == name
            and script.source == source
            for script in self.jenkins.status.applied_groovy_scripts
        )