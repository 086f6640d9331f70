import os
import sys
from decimal import Decimal

import pytest

# Add src to path for internal imports
src_path = os.path.join(os.path.dirname(os.path.dirname(os.path.abspath(__file__))), 'src')
if src_path not in sys.path:
    sys.path.insert(0, src_path)

from cleaning_pricing.config.settings import Settings
from cleaning_pricing.engine import OptionSelection, PricingEngine, PricingOption


def test_defaults(monkeypatch, tmp_path):
    for var in ('CLEANING_PRICING_SERVICE_FILE', 'CLEANING_PRICING_ROUNDING_QUANTUM',
                'CLEANING_PRICING_LOG_LEVEL'):
        monkeypatch.delenv(var, raising=False)

    settings = Settings.load(project_root=tmp_path)

    assert settings.project_root == tmp_path
    assert settings.rounding_quantum == Decimal('0.01')
    assert settings.log_level == 'WARNING'
    assert settings.service_file.name == 'standard_clean.json'
    assert settings.service_file.exists()


def test_environment_overrides(monkeypatch, tmp_path):
    monkeypatch.setenv('CLEANING_PRICING_SERVICE_FILE', str(tmp_path / 'service.json'))
    monkeypatch.setenv('CLEANING_PRICING_ROUNDING_QUANTUM', '1')
    monkeypatch.setenv('CLEANING_PRICING_LOG_LEVEL', 'debug')

    settings = Settings.load(project_root=tmp_path)

    assert settings.service_file == tmp_path / 'service.json'
    assert settings.rounding_quantum == Decimal('1')
    assert settings.log_level == 'DEBUG'


def test_bad_rounding_quantum_names_variable(monkeypatch, tmp_path):
    monkeypatch.setenv('CLEANING_PRICING_ROUNDING_QUANTUM', 'abc')

    with pytest.raises(ValueError, match='CLEANING_PRICING_ROUNDING_QUANTUM'):
        Settings.load(project_root=tmp_path)


def test_engine_uses_settings_quantum(tmp_path):
    settings = Settings(project_root=tmp_path, service_file=tmp_path / 's.json',
                        rounding_quantum=Decimal('1'))
    options = [PricingOption.per_unit(1, "Hours", "10.5")]

    result = PricingEngine(settings).calculate(options, [OptionSelection(option_id=1, quantity=1)])

    # half-even on whole dollars
    assert result.total == Decimal('10')
