from __future__ import annotations

import logging
import webbrowser
from dataclasses import dataclass
from typing import Callable, List, Optional

from vitalalert.core.alarm.alarm_base import OutputFactory, TimerFactory
from vitalalert.core.alarm.alarm_scheduler import AlarmScheduler
from vitalalert.core.alarm.tone_loop import ToneLoop
from vitalalert.core.config.vital_limits_registry import VitalLimitsRegistry
from vitalalert.core.config.yaml_config import AppConfig, load_app_config
from vitalalert.core.severity.classifier import SeverityClassifier
from vitalalert.core.state.alarm_store import AlarmHistory
from vitalalert.core.state.reading_store import ReadingStore
from vitalalert.domain.models import SeverityLevel
from vitalalert.notification.base import Dispatcher
from vitalalert.notification.deep_link import DeepLinkConfig, DeepLinkDispatcher
from vitalalert.notification.escalation import EscalationNotifier
from vitalalert.notification.notification_thread import DispatchWorkerThread
from vitalalert.notification.webhook_notifier import WebhookConfig, WebhookNotifier
from vitalalert.services.controller import MonitoringController

LOG_FORMAT = "%(asctime)s %(levelname)-7s %(name)s: %(message)s"


@dataclass(frozen=True)
class AppWiring:
    """Everything the UI layer needs to run the system."""
    config: AppConfig
    store: ReadingStore
    classifier: SeverityClassifier
    scheduler: AlarmScheduler
    notifier: EscalationNotifier
    controller: MonitoringController
    dispatch_worker: Optional[DispatchWorkerThread] = None

    def shutdown(self) -> None:
        self.controller.close()
        if self.dispatch_worker is not None:
            self.dispatch_worker.stop()


def configure_logging(level: str) -> None:
    logging.basicConfig(level=getattr(logging, level.upper(), logging.INFO), format=LOG_FORMAT)


def build_dispatch_worker(cfg: AppConfig) -> Optional[DispatchWorkerThread]:
    hook = cfg.escalation.webhook
    if hook is None:
        return None

    auth_header = hook.auth_header
    if auth_header and not auth_header.startswith("Bearer "):
        auth_header = f"Bearer {auth_header}"

    return DispatchWorkerThread(
        dispatchers=[
            WebhookNotifier(
                WebhookConfig(
                    url=hook.url,
                    auth_header=auth_header,
                    timeout_s=hook.timeout_s,
                    verify_tls=hook.verify_tls,
                )
            )
        ]
    )


def build_app_system(
    config_path: Optional[str] = None,
    timer_factory: Optional[TimerFactory] = None,
    output_factory: Optional[OutputFactory] = None,
    url_opener: Callable[[str], object] = webbrowser.open,
    config: Optional[AppConfig] = None,
) -> AppWiring:
    """
    Load configuration and wire the monitoring system.

    Parameters
    ----------
    config_path
        Optional YAML path; see `load_app_config` for the lookup order.
    timer_factory, output_factory
        Tone loop collaborators. When no timer factory is given the Qt
        timer and Qt audio output are used.
    url_opener
        Used by the deep-link dispatcher.
    config
        Already-parsed configuration; overrides ``config_path``.
    """
    cfg = config if config is not None else load_app_config(config_path)
    configure_logging(cfg.log_level)

    if timer_factory is None:
        from vitalalert.ui.qt_audio import qt_output_factory, qt_timer_factory

        timer_factory = qt_timer_factory
        if output_factory is None:
            output_factory = qt_output_factory

    # --- STATE ---
    store = ReadingStore()
    history = AlarmHistory()

    # --- CLASSIFICATION ---
    limits = VitalLimitsRegistry()
    limits.load(cfg.vitals)
    classifier = SeverityClassifier(limits=limits)

    # --- ALARM ---
    scheduler = AlarmScheduler(
        ToneLoop(timer_factory, output_factory),
        tones={SeverityLevel.WARNING: cfg.tones.warning, SeverityLevel.EMERGENCY: cfg.tones.emergency},
    )

    # --- ESCALATION ---
    dispatchers: List[Dispatcher] = []
    if cfg.escalation.open_deep_link:
        dispatchers.append(DeepLinkDispatcher(DeepLinkConfig(base_url=cfg.escalation.deep_link_base), opener=url_opener))
    worker = build_dispatch_worker(cfg)
    if worker is not None:
        worker.start()
        dispatchers.append(worker)

    notifier = EscalationNotifier(
        dispatchers,
        default_contact=cfg.escalation.default_contact,
        recent_count=cfg.escalation.recent_count,
    )

    # --- CONTROLLER ---
    controller = MonitoringController(
        store=store,
        classifier=classifier,
        scheduler=scheduler,
        notifier=notifier,
        profile=cfg.profile,
        history=history,
    )

    logging.getLogger(__name__).info(
        "monitoring %s: %s",
        cfg.profile.display_name or cfg.profile.name,
        ", ".join(v.label for v in limits.monitored()),
    )

    return AppWiring(
        config=cfg,
        store=store,
        classifier=classifier,
        scheduler=scheduler,
        notifier=notifier,
        controller=controller,
        dispatch_worker=worker,
    )
