from arena_core.infrastructure.persistence.json_recorder import JsonFileRecorder
from arena_core.infrastructure.persistence.records import (
    battle_config_from_dict,
    battle_config_to_dict,
    battle_to_record,
)

__all__ = [
    "JsonFileRecorder",
    "battle_config_from_dict",
    "battle_config_to_dict",
    "battle_to_record",
]
