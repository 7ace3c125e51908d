"""
CONFIG ENGINE
Load, validate, and expose the asset sheet layout

RESPONSIBILITIES:
- Load assets.yml
- Validate that both assets declare all four columns
- Expose read-only typed objects

RULES:
❌ No silent defaults for column names
✅ Fail fast on invalid config
"""

import yaml
from pathlib import Path
from typing import Dict

from dca_dashboard.core.errors import ConfigurationError
from dca_dashboard.domain.models import (
    AssetColumns,
    AssetConfig,
    AssetType,
    Currency,
)

REQUIRED_COLUMN_KEYS = ("date", "invested", "price", "purchased")


class ConfigEngine:
    """
    Configuration Engine
    Single source of truth for the sheet layout
    """

    def __init__(self, config_dir: Path):
        """Initialize with config directory"""
        self.config_dir = config_dir
        self._assets: Dict[AssetType, AssetConfig] = None

    def load_all(self) -> None:
        """Load all configuration files"""
        self._load_assets()
        self._validate_all()

    def _load_assets(self) -> None:
        """Load asset layouts from assets.yml"""
        assets_file = self.config_dir / "assets.yml"
        if not assets_file.exists():
            raise FileNotFoundError(f"Asset config not found: {assets_file}")

        with open(assets_file, 'r') as f:
            data = yaml.safe_load(f) or {}

        assets = {}
        for name, asset_data in (data.get('assets') or {}).items():
            try:
                asset = AssetType(name)
            except ValueError:
                raise ConfigurationError(f"Unsupported asset in config: {name}")

            columns = asset_data.get('columns') or {}
            missing = [key for key in REQUIRED_COLUMN_KEYS if not columns.get(key)]
            if missing:
                raise ConfigurationError(
                    f"Asset {name} is missing column names: {', '.join(missing)}"
                )

            static_prices = {
                Currency(cur.upper()): float(price)
                for cur, price in (asset_data.get('static_prices') or {}).items()
            }

            assets[asset] = AssetConfig(
                asset=asset,
                columns=AssetColumns(
                    date=str(columns['date']),
                    invested=str(columns['invested']),
                    price=str(columns['price']),
                    purchased=str(columns['purchased']),
                ),
                unit_label=str(asset_data.get('unit_label') or ""),
                static_prices=static_prices,
            )

        self._assets = assets

    def _validate_all(self) -> None:
        """Validate all configurations"""
        missing = [asset.value for asset in AssetType if asset not in self._assets]
        if missing:
            raise ConfigurationError(f"Asset config missing for: {', '.join(missing)}")

        for asset_config in self._assets.values():
            for currency, price in asset_config.static_prices.items():
                if price <= 0:
                    raise ConfigurationError(
                        f"Static price for {asset_config.asset.value}/{currency.value} must be positive"
                    )

    @property
    def assets(self) -> Dict[AssetType, AssetConfig]:
        if self._assets is None:
            raise RuntimeError("Configuration not loaded")
        return self._assets

    def get_asset(self, asset: AssetType) -> AssetConfig:
        return self.assets[asset]
