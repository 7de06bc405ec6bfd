from .chamber import advance_chamber, next_chamber, set_loaded_chamber
from .fire import consume_loaded_round, fire
from .reload import get_ammunition, perform_reload, post_reload_to_chat, reload, reload_all
from .unload import unload, unload_ammunition

__all__ = [
    "advance_chamber",
    "next_chamber",
    "set_loaded_chamber",
    "consume_loaded_round",
    "fire",
    "get_ammunition",
    "perform_reload",
    "post_reload_to_chat",
    "reload",
    "reload_all",
    "unload",
    "unload_ammunition",
]
