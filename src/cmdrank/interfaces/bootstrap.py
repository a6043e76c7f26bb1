"""Wiring of configured sessions from their parts."""

from __future__ import annotations

from cmdrank.application.session import AutoRefresh, RankSession
from cmdrank.domain.ranking.services import CommandSource, RankEngine
from cmdrank.infrastructure.storage.state_store import FileStateStore
from cmdrank.interfaces.toml_config import CmdRankConfig


def create_session(
    config: CmdRankConfig,
    source: CommandSource,
    scope: str | None = None,
) -> RankSession:
    """Build an uninitialized session persisting to the configured file."""
    engine = RankEngine(
        source=source,
        history_length=config.history_length,
        scope=scope,
    )
    store = FileStateStore(path=config.save_path)
    return RankSession(engine=engine, repository=store)


def create_auto_refresh(config: CmdRankConfig, engine: RankEngine) -> AutoRefresh:
    return AutoRefresh(
        engine=engine,
        interval=config.auto_update_interval,
        enabled=config.auto_update,
    )
