"""Pipeline executor for the install procedure.

Stages run strictly in order; each either advances the state machine or
raises an :class:`InstallerError`, which moves it to ``FAILED`` and ends the
run. All stages run inside a scoped scratch directory, so it is removed on
every exit path.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Callable, List, Optional, Tuple

from demongrep_installer.bootstrap.archive import extract_archive, locate_binary, verify_archive
from demongrep_installer.bootstrap.artifacts import archive_file_name, build_download_url
from demongrep_installer.bootstrap.download import DownloadManager
from demongrep_installer.bootstrap.installer import install_binary, query_installed_version
from demongrep_installer.bootstrap.paths import is_on_path, resolve_install_dir
from demongrep_installer.bootstrap.platform import get_platform_target
from demongrep_installer.bootstrap.scratch import scratch_directory
from demongrep_installer.bootstrap.versions import resolve_version
from demongrep_installer.config.models import InstallerConfig
from demongrep_installer.core.errors import InstallerError
from demongrep_installer.core.logging import get_logger
from demongrep_installer.core.models import (
    InstallResult,
    InstallTarget,
    PlatformTarget,
    ReleaseVersion,
    Stage,
)
from demongrep_installer.core.reporter import NullReporter, Reporter

LOGGER = get_logger(__name__)


@dataclass
class RunState:
    """Values produced by the stages of a single run."""

    scratch_dir: Path
    platform: Optional[PlatformTarget] = None
    version: Optional[ReleaseVersion] = None
    url: str = ""
    archive: Optional[Path] = None
    extract_dir: Optional[Path] = None
    binary: Optional[Path] = None
    target: Optional[InstallTarget] = None
    installed_path: Optional[Path] = None
    result: Optional[InstallResult] = None


class InstallPipeline:
    """Runs the install stages as an explicit state machine.

    ``Start -> PlatformDetected -> VersionResolved -> URLConstructed ->
    Downloaded -> Verified -> Extracted -> BinaryFound -> InstallDirResolved ->
    Installed -> Done``; any stage may move to ``Failed``.
    """

    def __init__(
        self,
        config: InstallerConfig,
        reporter: Optional[Reporter] = None,
        download_manager: Optional[DownloadManager] = None,
        platform_probe: Optional[Callable[[], PlatformTarget]] = None,
        version_fetch: Optional[Callable[[str, Optional[float]], str]] = None,
        scratch_parent: Optional[Path] = None,
    ) -> None:
        """Initialize the pipeline.

        Args:
            config: Installer configuration, read once at process entry.
            reporter: Progress reporter.
            download_manager: Download manager (default: built from config).
            platform_probe: Platform detection override (for tests).
            version_fetch: Latest-version fetch override (for tests).
            scratch_parent: Parent for the scratch directory (default: system temp).
        """
        self._config = config
        self._reporter = reporter or NullReporter()
        self._download_manager = download_manager or DownloadManager(
            max_attempts=config.download.max_attempts,
            retry_delay=config.download.retry_delay,
            timeout=config.download.timeout,
            reporter=self._reporter,
        )
        self._platform_probe = platform_probe or get_platform_target
        self._version_fetch = version_fetch
        self._scratch_parent = scratch_parent

        self.state = Stage.START
        self.history: List[Stage] = [Stage.START]
        self.failure: Optional[InstallerError] = None

    @property
    def stages(self) -> List[Tuple[Stage, Callable[[RunState], None]]]:
        """Ordered (state reached on success, stage function) pairs."""
        return [
            (Stage.PLATFORM_DETECTED, self._detect_platform),
            (Stage.VERSION_RESOLVED, self._resolve_version),
            (Stage.URL_CONSTRUCTED, self._construct_url),
            (Stage.DOWNLOADED, self._download),
            (Stage.VERIFIED, self._verify),
            (Stage.EXTRACTED, self._extract),
            (Stage.BINARY_FOUND, self._locate_binary),
            (Stage.INSTALL_DIR_RESOLVED, self._resolve_install_dir),
            (Stage.INSTALLED, self._install),
            (Stage.DONE, self._report),
        ]

    def execute(self) -> InstallResult:
        """Run every stage.

        Returns:
            InstallResult of the completed install.

        Raises:
            InstallerError: From the first failing stage.
        """
        if self.state != Stage.START:
            raise RuntimeError("InstallPipeline instances run only once")

        release = self._config.release
        self._reporter.info(f"Starting {release.binary_name} installation...")

        with scratch_directory(parent=self._scratch_parent) as scratch_dir:
            run = RunState(scratch_dir=scratch_dir)
            for next_state, stage in self.stages:
                try:
                    stage(run)
                except InstallerError as e:
                    if e.stage is None:
                        e.stage = next_state.value
                    self._transition(Stage.FAILED)
                    self.failure = e
                    LOGGER.debug(f"Stage towards {next_state.value} failed: {e}")
                    raise
                except BaseException:
                    self._transition(Stage.FAILED)
                    raise
                self._transition(next_state)

        assert run.result is not None
        return run.result

    def _transition(self, state: Stage) -> None:
        LOGGER.debug(f"{self.state.value} -> {state.value}")
        self.state = state
        self.history.append(state)

    # Stages

    def _detect_platform(self, run: RunState) -> None:
        run.platform = self._platform_probe()
        self._reporter.info(f"Detected: {run.platform.os.value} ({run.platform.arch.value})")
        self._reporter.info(f"Target triple: {run.platform.triple}")

    def _resolve_version(self, run: RunState) -> None:
        if not self._config.version:
            self._reporter.info("Fetching latest version...")
        run.version = resolve_version(
            self._config.version,
            self._config.release.latest_metadata_url,
            timeout=self._config.download.timeout,
            fetch=self._version_fetch,
        )
        if run.version.is_fallback:
            self._reporter.warning(
                "Could not fetch latest version from GitHub API, "
                f"using '{run.version.value}' tag"
            )
        self._reporter.info(f"Version to install: v{run.version.value}")

    def _construct_url(self, run: RunState) -> None:
        assert run.platform is not None and run.version is not None
        release = self._config.release
        run.url = build_download_url(
            release.release_base_url,
            release.repo,
            run.version.value,
            run.platform.triple,
        )
        self._reporter.info(f"Download URL: {run.url}")

    def _download(self, run: RunState) -> None:
        assert run.version is not None
        archive = run.scratch_dir / archive_file_name(self._config.release.repo, run.version.value)
        self._download_manager.download(run.url, archive)
        run.archive = archive

    def _verify(self, run: RunState) -> None:
        assert run.archive is not None
        self._reporter.info("Verifying archive integrity...")
        verify_archive(run.archive)
        self._reporter.success("Archive verification passed")

    def _extract(self, run: RunState) -> None:
        assert run.archive is not None
        extract_dir = run.scratch_dir / "extract"
        extract_dir.mkdir()
        self._reporter.info("Extracting archive...")
        extract_archive(run.archive, extract_dir)
        run.extract_dir = extract_dir
        self._reporter.success("Extraction successful")

    def _locate_binary(self, run: RunState) -> None:
        assert run.extract_dir is not None
        run.binary = locate_binary(
            run.extract_dir,
            self._config.release.binary_name,
            self._config.binary.search_depth,
        )
        self._reporter.info(f"Found binary: {run.binary}")

    def _resolve_install_dir(self, run: RunState) -> None:
        run.target = resolve_install_dir(self._config)
        LOGGER.debug(
            f"Install directory {run.target.directory} "
            f"(resolved by {run.target.resolved_by.value})"
        )

    def _install(self, run: RunState) -> None:
        assert run.binary is not None and run.target is not None
        binary_name = self._config.release.binary_name
        self._reporter.info(f"Installing to {run.target.directory}...")
        run.installed_path = install_binary(run.binary, run.target.directory, binary_name)
        self._reporter.success(f"Installed to {run.installed_path}")

    def _report(self, run: RunState) -> None:
        assert run.installed_path is not None and run.target is not None
        assert run.version is not None
        run.result = InstallResult(
            installed_path=run.installed_path,
            reported_version=query_installed_version(run.installed_path),
            on_path=is_on_path(run.target.directory, self._config.search_path),
            resolved_version=run.version.value,
        )
        self._reporter.summary(run.result, run.target.directory)
