# jenkins_operator

Applies groovy scripts and Configuration as Code YAML, kept in config maps
and secrets, to a Jenkins instance. Each script is applied once: a hash of
every applied script is recorded in the Jenkins resource status, and a
script whose hash is already recorded for the same configuration type,
source and name is skipped.

## Installation

```
pip install .
```

For running the tests:

```
pip install ".[test]"
pytest
```

## Modules

- `jenkins_operator.constants` – operator name (`OPERATOR_NAME`), seed job
  suffix, default master image, default HTTP and agent ports, the
  `JAVA_OPTS` variable name and the `LABEL_*` keys and values.
- `jenkins_operator.log` – `setup_logger(debug)` sets the
  `controller-jenkins` logger to DEBUG or INFO and attaches one stream
  handler; `get_logger()` returns that logger.
- `jenkins_operator.event` – `EventType` (`NORMAL`, `WARNING`) and
  `Recorder(component, sink=None)`. `emit(obj, event_type, reason, message)`
  passes the event to the sink; `emitf(obj, event_type, reason, fmt, *args)`
  formats the message with `%` first. Without a sink, events are written to
  the logger, warnings at WARNING level and the rest at INFO.
- `jenkins_operator.groovy` – the `Groovy` runner and the data it works on:
  `Jenkins`, `JenkinsSpec`, `JenkinsStatus`, `Customization`, `SecretRef`,
  `ConfigMapRef`, `ConfigMap`, `Secret`, `AppliedGroovyScript`. Also
  `calculate_hash(data)` (base64 SHA-256 over keys and values in sorted key
  order) and `add_secrets_loader_to_groovy_script(secrets_path)`, which
  returns a function that inserts a secrets-loading snippet after a
  script's `import` lines.
- `jenkins_operator.casc` – `ConfigurationAsCode`, which takes the `.yaml`
  and `.yml` entries of the config maps in
  `jenkins.spec.configuration_as_code`, wraps each in a groovy script for
  the Configuration as Code plugin and applies it. `prepare_script` and
  `split_too_long_script` cut content longer than 65535 characters into
  pieces of a Groovy string-array literal.

## The Groovy runner

```python
from jenkins_operator.groovy import (
    ConfigMapRef, Customization, Groovy, add_secrets_loader_to_groovy_script,
)

customization = Customization(configurations=[ConfigMapRef(name="user-config")])
runner = Groovy(jenkins_client, kubernetes_client, jenkins, "user-groovy", customization)

requeue = runner.wait_for_secret_synchronization("/var/jenkins/groovy-scripts-secrets")
if not requeue:
    requeue = runner.ensure(
        lambda name: name.endswith(".groovy"),
        add_secrets_loader_to_groovy_script("/var/jenkins/groovy-scripts-secrets"),
    )
```

- `ensure_single(source, name, hash_value, groovy_script)` runs one script
  unless it is already recorded, replaces any earlier record for the same
  configuration type, source and name, calls `update_status` and returns
  `True`. It returns `False` when nothing was run.
- `ensure(name_filter, update_groovy_script)` walks the configured config
  maps, entries in sorted order, passes each script through
  `update_groovy_script`, skips names the filter rejects, and hashes the
  script together with the customization secret's data. It returns `True`
  as soon as one script has been applied, and `False` once all are up to
  date.
- `wait_for_secret_synchronization(secrets_path)` runs a script that waits
  in Jenkins until the customization secret is mounted with the expected
  hash; it does nothing when no secret is configured.
- `is_groovy_script_already_applied(source, name, hash_value)` tells
  whether that exact script version is recorded.

A return value of `True` means: call again, there may be more to apply.

## Clients you supply

The package holds no Jenkins or Kubernetes client of its own. You pass in
objects that fit the `JenkinsClient` and `KubernetesClient` protocols:

- `execute_script(script)` runs a script and returns its logs, raising
  `GroovyScriptExecutionFailed` on failure. The runner fills in the
  exception's `configuration_type`, `source` and `name` and re-raises it.
- `get_secret(namespace, name)` and `get_config_map(namespace, name)`
  return a `Secret` or `ConfigMap` (raise `LookupError` when missing).
- `update_status(jenkins)` persists the resource status.

`ConfigurationAsCode(jenkins_client, kubernetes_client, jenkins,
secrets_path)` uses the same clients; its `ensure()` first waits for secret
synchronization at `secrets_path`, then applies the YAML.

## What it does not do

There is no command-line program and no reconciliation loop: something else
has to decide when to call `ensure`. It does not talk to a cluster or to
Jenkins by itself, and `Recorder` does not publish events anywhere but to
the sink you give it or to the log.