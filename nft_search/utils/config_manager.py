"""
Configuration manager for nft-search

Loads search settings from a JSON or YAML file, applies environment variable
overrides and validates the result.

Design Notes:
- JSON for .json files, PyYAML for .yaml/.yml
- NFT_SEARCH_<FIELD> environment variables override file values; values are
  parsed as JSON first and fall back to plain strings
- Validation failures raise ConfigurationError naming the offending field
"""

import json
import os
import logging
from dataclasses import asdict, dataclass, field, fields
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import yaml
from eth_utils import is_hex_address

from .exceptions import ConfigurationError, ErrorCodes

LOG = logging.getLogger(__name__)

ENV_PREFIX = "NFT_SEARCH_"


@dataclass
class SearchConfig:
    """Validated search configuration"""
    rpc_url: str
    contract_address: str
    owner: str
    collections: List[str] = field(default_factory=list)
    limit: int = 100
    block: Union[str, int] = "latest"
    timeout: float = 30.0

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


class ConfigManager:
    """
    Loads and validates SearchConfig from files, the environment and
    explicit overrides (e.g. CLI flags), in that order of precedence.
    """

    REQUIRED_FIELDS = ("rpc_url", "contract_address", "owner", "collections")

    def __init__(self, env_prefix: str = ENV_PREFIX):
        self.env_prefix = env_prefix

    def _read_file(self, path: Path) -> Dict[str, Any]:
        """Read a JSON or YAML mapping from disk"""
        if not path.exists():
            raise ConfigurationError(
                f"Configuration file not found: {path}",
                config_file=str(path),
                code=ErrorCodes.CONFIG_NOT_FOUND
            )

        try:
            with open(path, 'r') as f:
                if path.suffix in (".yaml", ".yml"):
                    data = yaml.safe_load(f)
                else:
                    data = json.load(f)
        except (json.JSONDecodeError, yaml.YAMLError) as e:
            raise ConfigurationError(
                f"Invalid configuration file {path}: {e}",
                config_file=str(path)
            )

        if data is None:
            return {}
        if not isinstance(data, dict):
            raise ConfigurationError(
                f"Configuration root must be a mapping, got {type(data).__name__}",
                config_file=str(path)
            )
        return data

    def _get_env_override(self, key: str, default: Any = None) -> Any:
        """Get environment variable override"""
        env_value = os.getenv(f"{self.env_prefix}{key.upper()}")

        if env_value is not None:
            # Try to parse as JSON first
            try:
                return json.loads(env_value)
            except json.JSONDecodeError:
                return env_value

        return default

    def _apply_env_overrides(self, config: Dict[str, Any]) -> Dict[str, Any]:
        result = dict(config)
        for config_field in fields(SearchConfig):
            override = self._get_env_override(config_field.name)
            if override is not None:
                LOG.debug(f"Environment override for '{config_field.name}'")
                result[config_field.name] = override
        return result

    def load(self, path: Optional[Union[str, Path]] = None,
             overrides: Optional[Dict[str, Any]] = None) -> SearchConfig:
        """
        Load configuration.

        Args:
            path: Optional JSON/YAML file
            overrides: Values that take precedence over file and environment;
                None values are ignored

        Returns:
            Validated SearchConfig

        Raises:
            ConfigurationError: Missing file, unreadable file or invalid values
        """
        config: Dict[str, Any] = {}
        config_file = None
        if path is not None:
            config_file = Path(path)
            config = self._read_file(config_file)
            LOG.debug(f"Loaded configuration from {config_file}")

        config = self._apply_env_overrides(config)
        for key, value in (overrides or {}).items():
            if value is not None:
                config[key] = value

        return self.validate(config, config_file=str(config_file) if config_file else None)

    def validate(self, config: Dict[str, Any], config_file: str = None) -> SearchConfig:
        """Validate a raw mapping and build a SearchConfig"""
        known = {f.name for f in fields(SearchConfig)}
        unknown = sorted(set(config) - known)
        if unknown:
            LOG.warning(f"Ignoring unknown configuration keys: {unknown}")

        for name in self.REQUIRED_FIELDS:
            if config.get(name) in (None, "", []):
                raise ConfigurationError(
                    f"Missing required configuration value '{name}'",
                    config_file=config_file,
                    field=name
                )

        collections = config["collections"]
        if isinstance(collections, str):
            collections = [c.strip() for c in collections.split(",") if c.strip()]
        if not isinstance(collections, list):
            raise ConfigurationError(
                "'collections' must be a list of addresses",
                config_file=config_file,
                field="collections"
            )

        self._check_address(config["contract_address"], "contract_address", config_file)
        self._check_address(config["owner"], "owner", config_file)
        for address in collections:
            self._check_address(address, "collections", config_file)

        limit = config.get("limit", 100)
        if isinstance(limit, str) and limit.isdigit():
            limit = int(limit)
        if isinstance(limit, bool) or not isinstance(limit, int) or not 0 <= limit < 2 ** 256:
            raise ConfigurationError(
                f"'limit' must be a non-negative uint256, got {limit!r}",
                config_file=config_file,
                field="limit"
            )

        try:
            timeout = float(config.get("timeout", 30.0))
        except (TypeError, ValueError):
            raise ConfigurationError(
                f"'timeout' must be a number, got {config.get('timeout')!r}",
                config_file=config_file,
                field="timeout"
            )
        if timeout <= 0:
            raise ConfigurationError(
                f"'timeout' must be positive, got {timeout}",
                config_file=config_file,
                field="timeout"
            )

        # eth_call takes a block tag or a hex quantity
        block = config.get("block", "latest")
        if isinstance(block, str) and block.isdigit():
            block = int(block)
        if isinstance(block, int) and not isinstance(block, bool):
            block = hex(block)

        return SearchConfig(
            rpc_url=str(config["rpc_url"]),
            contract_address=config["contract_address"],
            owner=config["owner"],
            collections=list(collections),
            limit=limit,
            block=block,
            timeout=timeout,
        )

    @staticmethod
    def _check_address(value: Any, name: str, config_file: str = None) -> None:
        if not isinstance(value, str) or not is_hex_address(value):
            raise ConfigurationError(
                f"'{name}' contains an invalid address: {value!r}",
                config_file=config_file,
                field=name
            )
