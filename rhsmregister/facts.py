# This file is part of rhsm-register. See LICENSE file for license information.
"""Read-only probes of the local registration: certificates, configured
server hostname and cached facts."""

import logging
import os
import re
from typing import Dict, Optional, Sequence

from rhsmregister import settings, util
from rhsmregister.subp import ProcessExecutionError

LOG = logging.getLogger(__name__)

HOSTNAME_RE = re.compile(r"hostname = ([a-z0-9.\-_]+)")


class FactCache:
    """Facts cached on disk as a JSON object by an out-of-band collector.

    The file is read once, on first lookup. A missing or unreadable file is
    an empty cache.
    """

    def __init__(self, path: str = settings.FACTS_FILE):
        self.path = path
        self._facts: Optional[Dict] = None

    def _load(self) -> Dict:
        if self._facts is not None:
            return self._facts
        try:
            self._facts = util.load_json(util.load_text_file(self.path))
        except FileNotFoundError:
            LOG.debug("No cached facts at %s", self.path)
            self._facts = {}
        except (OSError, ValueError, TypeError) as e:
            LOG.warning("Ignoring unreadable fact cache %s: %s", self.path, e)
            self._facts = {}
        return self._facts

    def get(self, key: str) -> str:
        value = self._load().get(key)
        if value is None:
            return ""
        return value if isinstance(value, str) else str(value)


class FactProbe:
    def __init__(
        self,
        runner,
        facts: FactCache,
        cert_files: Sequence[str] = settings.CONSUMER_CERT_FILES,
    ):
        self.runner = runner
        self.facts = facts
        self.cert_files = cert_files

    def certs_present(self) -> bool:
        """Do we have certificates from a registration?"""
        return any(os.path.exists(path) for path in self.cert_files)

    def cached_ca_name(self) -> str:
        return self.facts.get(settings.FACT_CA_NAME)

    def cached_identity(self) -> str:
        return self.facts.get(settings.FACT_IDENTITY)

    def configured_hostname(self) -> str:
        """Return the server hostname subscription-manager is configured
        to use, or an empty string if nothing can be found."""
        try:
            result = self.runner.execute(["config", "--list"])
        except ProcessExecutionError as e:
            LOG.debug("Unable to read subscription-manager config: %s", e)
            return ""
        for line in result.output.splitlines():
            match = HOSTNAME_RE.search(line)
            if match:
                return match.group(1).rstrip()
        return ""
