from pathlib import Path


# Base directory
BASE_DIR = Path(__file__).resolve().parent.parent.parent.parent

# Log directory
LOG_DIR = BASE_DIR / 'logs'

# Lua scripts shipped with the seat lock store
LUA_SCRIPT_DIR = (
    BASE_DIR / 'src' / 'service' / 'seat_reservation' / 'driven_adapter' / 'state' / 'lua_script'
)
