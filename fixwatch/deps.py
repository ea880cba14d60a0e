import logging
import shutil
import subprocess
from typing import Callable, Iterator, List, Optional

from .config import CheckResult

REQUIRED_TOOLS = [("php", "PHP"), ("npm", "NPM"), ("composer", "COMPOSER")]

PHPCS_INSTALL = ["composer", "global", "require", "squizlabs/php_codesniffer=*"]
STYLELINT_INSTALL = ["npm", "install", "-g", "stylelint"]
ESLINT_INSTALL = ["npm", "install", "-g", "eslint"]

ALL_PRESENT = "ALL DEPENDENCIES ARE PRESENT"


class DependencyChecker:
    """Probe the PATH for the external tools and install missing linters.

    The lookup and the installer runner are injected so the checks never touch
    the real environment unless asked to.
    """

    def __init__(
        self,
        which: Callable[[str], Optional[str]] = shutil.which,
        runner: Callable[..., subprocess.CompletedProcess] = subprocess.run,
        probe_all_linters: bool = False,
        notify: Optional[Callable[[str], None]] = None,
    ) -> None:
        self.which = which
        self.runner = runner
        self.probe_all_linters = probe_all_linters
        self.notify = notify or logging.info
        self.installed: List[str] = []

    def iter_checks(self) -> Iterator[CheckResult]:
        for tool, label in REQUIRED_TOOLS:
            if not self.which(tool):
                yield CheckResult(False, f"Sorry, this script requires {label}")
                return
            yield CheckResult(True, f"{label} found")

        if not self.which("phpcs") or not self.which("phpcbf"):
            yield self._install("PHP CodeSniffer", PHPCS_INSTALL)
        else:
            yield CheckResult(True, "PHP CodeSniffer found")

        stylelint_present = bool(self.which("stylelint"))
        if not stylelint_present:
            yield self._install("STYLELINT", STYLELINT_INSTALL)
        else:
            yield CheckResult(True, "STYLELINT found")

        # eslint is only probed once stylelint was already there, unless asked otherwise
        if stylelint_present or self.probe_all_linters:
            if not self.which("eslint"):
                yield self._install("ESLINT", ESLINT_INSTALL)
            else:
                yield CheckResult(True, "ESLINT found")

    def run(self) -> CheckResult:
        """Run the checks in order and stop at the first failure."""
        for result in self.iter_checks():
            if not result.ok:
                return result
            logging.debug(result.message)
        return CheckResult(True, ALL_PRESENT)

    def _install(self, label: str, argv: List[str]) -> CheckResult:
        self.notify(f"You do not seem to have {label} installed.")
        self.notify("This dependency will now be installed, please wait...")
        try:
            proc = self.runner(argv, check=False)
        except OSError as e:
            return CheckResult(
                False,
                f"Error: Installing {label} failed ({e}), this program will now terminate",
            )
        if proc.returncode != 0:
            return CheckResult(
                False, f"Error: Installing {label} failed, this program will now terminate"
            )
        self.installed.append(label)
        self.notify(f"✓ {label} installed.")
        return CheckResult(True, f"{label} installed.")
