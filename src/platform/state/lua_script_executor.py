"""
Lua Scripts for Redis

Simplified approach using redis-py's built-in register_script().
"""

from pathlib import Path
from typing import Any

from redis.asyncio import Redis
from redis.exceptions import NoScriptError

from src.platform.constant.path import LUA_SCRIPT_DIR
from src.platform.logging.loguru_io import Logger


class LuaScripts:
    """Manages Lua scripts using redis-py's register_script()"""

    def __init__(self, *, script_dir: Path = LUA_SCRIPT_DIR) -> None:
        self._script_dir = script_dir
        self._sources: dict[str, str] = {}
        self._scripts: dict[str, Any] = {}

    async def initialize(self, *, client: Redis) -> None:
        """Load every *.lua under the script dir (idempotent)"""
        if self._scripts:
            return

        for path in sorted(self._script_dir.glob('*.lua')):
            self._sources[path.stem] = path.read_text()
            self._scripts[path.stem] = client.register_script(self._sources[path.stem])
            Logger.base.info(f'📜 [LUA] Registered {path.stem}')

        if not self._scripts:
            Logger.base.warning(f'⚠️ [LUA] No scripts found under {self._script_dir}')

    async def execute(self, name: str, *, client: Redis, keys: list[str], args: list[Any]) -> Any:
        """Run a registered script, re-registering once if the server flushed its cache"""
        script = self._scripts.get(name)
        if script is None:
            raise RuntimeError(f'Lua script {name!r} not initialized')

        try:
            return await script(keys=keys, args=args, client=client)
        except NoScriptError:
            Logger.base.warning(f'⚠️ [LUA] {name} not found, re-registering...')
            self._scripts[name] = client.register_script(self._sources[name])
            return await self._scripts[name](keys=keys, args=args, client=client)


# Global singleton
lua_script_executor = LuaScripts()
