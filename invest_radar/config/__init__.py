from .settings import settings, Settings
from .states import STATE_TABLE, ALL_STATES, StateAlias
from .sectors import SECTORS

__all__ = ["settings", "Settings", "STATE_TABLE", "ALL_STATES", "StateAlias", "SECTORS"]
