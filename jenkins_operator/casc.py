"""Configures Jenkins through the Configuration as Code plugin."""

from __future__ import annotations

from .groovy import Groovy, Jenkins, JenkinsClient, KubernetesClient

CONFIGURATION_TYPE = "user-casc"

# Longest string literal a Groovy class file can hold.
GROOVY_UTF8_MAX_STRING_LENGTH = 65535

_APPLY_CONFIGURATION_AS_CODE_SCRIPT_FMT = """
String[] configContent = ['''%s''']

def configSb = new StringBuffer()
for (int i=0; i<configContent.size(); i++) {
    configSb << configContent[i]
}

def stream = new ByteArrayInputStream(configSb.toString().getBytes('UTF-8'))
def source = io.jenkins.plugins.casc.yaml.YamlSource.of(stream)

io.jenkins.plugins.casc.ConfigurationAsCode.get().configureWith(source)
"""


def _is_yaml(name: str) -> bool:
    return name.endswith((".yaml", ".yml"))


def split_too_long_script(groovy_script: str) -> list[str]:
    """Cut a script into full-length chunks followed by the remainder.

    The remainder is always appended, so a script whose length is an exact
    multiple of the limit ends with an empty chunk.
    """
    limit = GROOVY_UTF8_MAX_STRING_LENGTH
    full_chunks, remainder = divmod(len(groovy_script), limit)
    chunks = [groovy_script[i * limit:(i + 1) * limit] for i in range(full_chunks)]
    chunks.append(groovy_script[len(groovy_script) - remainder:])
    return chunks


def prepare_script(script: str) -> str:
    """Return the script as the body of a Groovy string-array literal."""
    if len(script) > GROOVY_UTF8_MAX_STRING_LENGTH:
        pieces = split_too_long_script(script)
    else:
        pieces = [script]
    return "''','''".join(pieces)


def _wrap_configuration(groovy_script: str) -> str:
    return _APPLY_CONFIGURATION_AS_CODE_SCRIPT_FMT % prepare_script(groovy_script)


class ConfigurationAsCode:
    """Applies YAML configuration from config maps via a Groovy script."""

    def __init__(
        self,
        jenkins_client: JenkinsClient,
        k8s_client: KubernetesClient,
        jenkins: Jenkins,
        secrets_path: str,
    ) -> None:
        self.secrets_path = secrets_path
        self._groovy = Groovy(
            jenkins_client,
            k8s_client,
            jenkins,
            CONFIGURATION_TYPE,
            jenkins.spec.configuration_as_code,
        )

    def ensure(self, jenkins: Jenkins | None = None) -> bool:
        """Apply pending configuration; return True when a requeue is needed."""
        if self._groovy.wait_for_secret_synchronization(self.secrets_path):
            return True
        return self._groovy.ensure(_is_yaml, _wrap_configuration)