"""
L5 Orchestration — Pipeline controller.

Sequences the stages as a state machine:

    DETECTING → INSTALLING_DEPS → SETTING_ENV → ACQUIRING → CONFIGURING
        → COMPILING → COMPANION → VERIFYING → DONE

Any failed stage moves to FAILED, where the failure is diagnosed and
the troubleshooting menu decides the next state: back to SETTING_ENV,
back to INSTALLING_DEPS, or stay FAILED (exit 1). Those two are the
only backward edges. The companion branch never fails the run.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from enum import StrEnum
from pathlib import Path

from wrfbuild.core.config.settings import InstallerSettings
from wrfbuild.core.models.context import InstallationContext
from wrfbuild.core.models.profile import SystemProfile
from wrfbuild.core.models.result import StageResult
from wrfbuild.core.observability.display import banner, section, success
from wrfbuild.core.services.build.data.messages import (
    PROMPT_COMPANION,
    PROMPT_CONTINUE,
    PROMPT_INSTALL_DIR,
    PROMPT_OVERWRITE,
    RULE,
    SUCCESS_TEMPLATE,
    WELCOME_TEMPLATE,
)
from wrfbuild.core.services.build.detection.system_profile import probe
from wrfbuild.core.services.build.domain.prompter import Prompter
from wrfbuild.core.services.build.execution.acquisition import acquire
from wrfbuild.core.services.build.execution.compilation import compile_target
from wrfbuild.core.services.build.execution.configuration import (
    configure,
    configure_companion,
)
from wrfbuild.core.services.build.execution.dependencies import install
from wrfbuild.core.services.build.execution.environment import materialize
from wrfbuild.core.services.build.execution.verification import verify
from wrfbuild.core.services.build.orchestration.troubleshooting import (
    ACTION_REENTER_DEPS,
    ACTION_REENTER_ENV,
    diagnose,
    report_log_locations,
    troubleshoot,
)

logger = logging.getLogger(__name__)


class State(StrEnum):
    """Pipeline states."""

    DETECTING = "detecting"
    INSTALLING_DEPS = "installing_deps"
    SETTING_ENV = "setting_env"
    ACQUIRING = "acquiring"
    CONFIGURING = "configuring"
    COMPILING = "compiling"
    COMPANION = "companion"
    VERIFYING = "verifying"
    DONE = "done"
    FAILED = "failed"


_FORWARD: dict[State, State] = {
    State.DETECTING: State.INSTALLING_DEPS,
    State.INSTALLING_DEPS: State.SETTING_ENV,
    State.SETTING_ENV: State.ACQUIRING,
    State.ACQUIRING: State.CONFIGURING,
    State.CONFIGURING: State.COMPILING,
    State.COMPILING: State.COMPANION,
    State.COMPANION: State.VERIFYING,
    State.VERIFYING: State.DONE,
}

# What the user is told when a stage fails
_FAILURE_MESSAGES: dict[State, str] = {
    State.INSTALLING_DEPS: "Failed to install prerequisites.",
    State.SETTING_ENV: "Failed to setup environment variables.",
    State.ACQUIRING: "Failed to download {app}.",
    State.CONFIGURING: "Failed to configure {app}.",
    State.COMPILING: "Failed to compile {app}.",
    State.VERIFYING: "Installation verification failed.",
}


@dataclass
class PipelineOutcome:
    """How a run ended."""

    exit_code: int
    state: State
    cancelled: bool = False
    install_root: Path | None = None
    results: list[StageResult] = field(default_factory=list)
    failure: StageResult | None = None

    @property
    def ok(self) -> bool:
        return self.exit_code == 0


class InstallPipeline:
    """Interactive controller for one installation run.

    Args:
        settings: Versions, URLs and file names for this run.
        prompter: Source of every user decision.
    """

    def __init__(self, settings: InstallerSettings, prompter: Prompter) -> None:
        self.settings = settings
        self.prompter = prompter
        self.profile: SystemProfile | None = None
        self.ctx: InstallationContext | None = None
        self.results: list[StageResult] = []
        self._main_acquired = False

    # ── Entry point ─────────────────────────────────────────────

    def run(self) -> PipelineOutcome:
        s = self.settings
        logger.info("=== %s Installation Started ===", s.app_name)
        logger.info("%s version: %s", s.app_name, s.main_version)

        self._show(WELCOME_TEMPLATE.format(
            rule=RULE, app=s.app_name, companion=s.companion_name, version=s.main_version,
        ))
        if not self.prompter.confirm(PROMPT_CONTINUE, default=True):
            logger.info("Installation cancelled by user.")
            report_log_locations(s.log_path(), s.error_log_path())
            return PipelineOutcome(exit_code=0, state=State.DETECTING, cancelled=True)

        install_root = self.choose_install_root()
        self.ctx = InstallationContext(install_root=install_root)
        return self.run_stages(State.DETECTING)

    def run_stages(self, state: State) -> PipelineOutcome:
        """Drive the state machine from ``state`` until DONE or FAILED."""
        if self.ctx is None:
            raise RuntimeError("run_stages() needs an InstallationContext")

        while state not in (State.DONE, State.FAILED):
            result = self._run_state(state)
            if result is not None:
                self.results.append(result)
            if result is None or result.ok:
                state = _FORWARD[state]
                continue

            next_state = self._handle_failure(state, result)
            if next_state is State.FAILED:
                return PipelineOutcome(
                    exit_code=1, state=State.FAILED, install_root=self.ctx.install_root,
                    results=self.results, failure=result,
                )
            state = next_state

        self._report_success()
        return PipelineOutcome(
            exit_code=0, state=State.DONE, install_root=self.ctx.install_root,
            results=self.results,
        )

    # ── Install directory ───────────────────────────────────────

    def choose_install_root(self) -> Path:
        """Ask for the install directory until a usable one is given."""
        default = self.settings.default_install_dir
        section(logger, "Installation Directory")
        logger.info("Please specify where to install %s.", self.settings.app_name)
        logger.info("Default location: %s", Path(default).expanduser())

        while True:
            answer = self.prompter.ask(PROMPT_INSTALL_DIR, default=default).strip() or default
            path = Path(answer).expanduser()

            if path.is_dir() and any(path.iterdir()):
                if not self.prompter.confirm(PROMPT_OVERWRITE, default=True):
                    continue
            else:
                try:
                    path.mkdir(parents=True, exist_ok=True)
                except OSError as e:
                    logger.error("Cannot create %s: %s", path, e)
                    continue

            if not os.access(path, os.W_OK):
                logger.error("Directory %s is not writable. Choose another location.", path)
                continue

            logger.info("Will install %s in: %s", self.settings.app_name, path)
            return path

    # ── States ──────────────────────────────────────────────────

    def _run_state(self, state: State) -> StageResult | None:
        ctx, s = self.ctx, self.settings
        assert ctx is not None

        if state is State.DETECTING:
            self.profile = probe(ctx.install_root)
            return None
        if state is State.INSTALLING_DEPS:
            return install(self._profile())
        if state is State.SETTING_ENV:
            return materialize(ctx, s)
        if state is State.ACQUIRING:
            if self._main_acquired and ctx.source_dir(s.app_name).is_dir():
                logger.info("%s source already present, skipping download.", s.app_name)
                return None
            result = acquire(ctx, "main", s)
            self._main_acquired = result.ok
            return result
        if state is State.CONFIGURING:
            return configure(ctx, s, self.prompter)
        if state is State.COMPILING:
            return compile_target(ctx, "main", s)
        if state is State.COMPANION:
            self._run_companion()
            return None
        if state is State.VERIFYING:
            return verify(ctx, s)
        raise ValueError(f"No stage for state {state}")

    def _profile(self) -> SystemProfile:
        if self.profile is None:
            assert self.ctx is not None
            self.profile = probe(self.ctx.install_root)
        return self.profile

    def _run_companion(self) -> None:
        """Optional preprocessing build. Failures are reported, never fatal."""
        ctx, s = self.ctx, self.settings
        assert ctx is not None

        question = PROMPT_COMPANION.format(companion=s.companion_name, app=s.app_name)
        ctx.wants_preprocessing = self.prompter.confirm(question, default=True)
        if not ctx.wants_preprocessing:
            return

        steps = (
            ("Failed to download {name}.", lambda: acquire(ctx, "companion", s)),
            ("Failed to configure and compile {name}.", lambda: configure_companion(ctx, s)),
            ("Failed to configure and compile {name}.",
             lambda: compile_target(ctx, "companion", s)),
        )
        for message, step in steps:
            result = step()
            self.results.append(result)
            if result.failed:
                logger.error(message.format(name=s.companion_name))
                logger.error("%s", result.reason)
                diagnose(result, s.error_log_path(), s.app_name, ctx.install_root)
                logger.warning("Continuing without %s.", s.companion_name)
                return

        ctx.companion_built = True

    # ── Failure handling ────────────────────────────────────────

    def _handle_failure(self, state: State, result: StageResult) -> State:
        ctx, s = self.ctx, self.settings
        assert ctx is not None
        logger.error(_FAILURE_MESSAGES[state].format(app=s.app_name))
        logger.error("%s", result.reason)

        diagnose(result, s.error_log_path(), s.app_name, ctx.install_root)
        action = troubleshoot(self.prompter, s.log_path(), s.error_log_path())

        if action == ACTION_REENTER_ENV:
            return State.SETTING_ENV
        if action == ACTION_REENTER_DEPS:
            return State.INSTALLING_DEPS
        return State.FAILED

    def _show(self, text: str) -> None:
        self.prompter.show(text)
        banner(logger, text)

    def _report_success(self) -> None:
        ctx, s = self.ctx, self.settings
        assert ctx is not None

        section(logger, "Installation Complete")
        self._show(SUCCESS_TEMPLATE.format(
            app=s.app_name,
            install_root=ctx.install_root,
            version=s.main_version,
            descriptor=ctx.install_root / s.descriptor_name,
        ))
        success(logger, f"{s.app_name} installation completed successfully.")
        report_log_locations(s.log_path(), s.error_log_path())
