"""Structured event logger used across the bot."""

from __future__ import annotations

import logging
import os


class BotLogger:
    def __init__(self, name: str = "ircbot", log_file: str | None = None) -> None:
        # Fixed width for event name column when in debug (alignment)
        self._event_name_width = 32
        self.logger = logging.getLogger(name)
        self.log_file = log_file
        debug_enabled = self._is_debug_enabled()
        self.logger.setLevel(logging.DEBUG if debug_enabled else logging.INFO)

        # Console output goes through the root handler installed by
        # LoggerConfigurator; only the optional file sink is attached here.
        if log_file:
            self.add_file_sink(log_file)

    def set_level(self, level: int) -> None:
        self.logger.setLevel(level)

    def add_file_sink(self, log_file: str) -> None:
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setFormatter(
            logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")
        )
        self.logger.addHandler(file_handler)
        self.log_file = log_file

    def log_event(
        self,
        domain: str,
        action: str,
        level: int = logging.INFO,
        human: str | None = None,
        *,
        exc_info: bool = False,
        **kwargs: object,
    ) -> None:
        event_name = f"{domain}_{action}".lower()
        human_text = human
        derived = False
        if human_text is None:
            # Local import to avoid cyclic import issues during module init.
            from .event_catalog import EVENT_TEMPLATES as _event_templates

            template = _event_templates.get((domain, action))
            if template:
                try:
                    human_text = template.format(**kwargs)
                except (KeyError, IndexError, ValueError):
                    human_text = template
            else:
                human_text = f"{domain.replace('_', ' ')}: {action.replace('_', ' ')}"
                derived = True
        kwargs.setdefault("_human_text", human_text)
        if derived:
            kwargs.setdefault("derived", True)
        self._log(level, event_name, exc_info=exc_info, **kwargs)

    def _log(
        self, level: int, event_name: str, exc_info: bool = False, **kwargs: object
    ) -> None:
        debug_enabled = self._is_debug_enabled()
        kw: dict[str, object] = dict(kwargs)  # copy for mutation in extract
        server, target, human_text = self._extract_reserved(kw)
        prefix = self._build_prefix(server, target)
        msg = (
            self._build_debug_message(event_name, prefix, human_text, kw)
            if debug_enabled
            else self._build_concise_message(event_name, prefix, human_text)
        )
        self.logger.log(level, msg, exc_info=exc_info)

    @staticmethod
    def _is_debug_enabled() -> bool:
        return os.environ.get("DEBUG", "false").lower() in ("true", "1", "yes")

    @staticmethod
    def _extract_reserved(
        kwargs: dict[str, object],
    ) -> tuple[str | None, str | None, str | None]:
        server_o = kwargs.pop("server", None)
        target_o = kwargs.pop("target", None)
        human_text_o = kwargs.pop("_human_text", None) or kwargs.get("human")
        kwargs.pop("human", None)
        server = server_o if isinstance(server_o, str) else None
        target = target_o if isinstance(target_o, str) else None
        human_text = human_text_o if isinstance(human_text_o, str) else None
        return server, target, human_text

    @staticmethod
    def _build_prefix(server: str | None, target: str | None) -> str:
        label = server or "system"
        core = f"{label} {target}" if target else label
        padded = core.ljust(24)[:24]
        return f"[{padded}]"

    def _build_debug_message(
        self,
        event_name: str,
        prefix: str,
        human_text: str | None,
        kwargs: dict[str, object],
    ) -> str:
        context = ", ".join(f"{k}={v}" for k, v in kwargs.items())
        width = self._event_name_width
        if len(event_name) <= width:
            ev = event_name.ljust(width)
        else:  # truncate but keep rightmost indicator
            ev = event_name[: width - 1] + "…"
        base = f"{ev} {prefix}"
        if human_text:
            base = f"{base} {human_text}"
        if context:
            base = f"{base} ({context})"
        return base

    @staticmethod
    def _build_concise_message(
        event_name: str, prefix: str, human_text: str | None
    ) -> str:
        return f"{prefix} {human_text or event_name}"


logger = BotLogger()
