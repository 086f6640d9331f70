"""
Generate golden test cases by running the current pricing engine on the
bundled sample service.
This captures current behavior as a regression baseline.
"""
import os
import sys

import pandas as pd

# Add src to path for internal imports
src_path = os.path.join(os.path.dirname(os.path.dirname(os.path.abspath(__file__))), 'src')
if src_path not in sys.path:
    sys.path.insert(0, src_path)

from cleaning_pricing.config.settings import get_settings
from cleaning_pricing.engine import CalculationError, OptionSelection, PricingEngine
from cleaning_pricing.services.catalog_service import load_service


def parse_selections(notation: str) -> list[OptionSelection]:
    """
    Parse the compact selection notation used in golden_cases.csv.

    "1:q=3;2:c=Large;3:e=1;4" -> quantity 3 for option 1, choice "Large"
    for option 2, option 3 enabled, option 4 selected with its default.
    """
    selections = []
    for part in filter(None, notation.split(';')):
        option_id, _, value = part.partition(':')
        kwargs = {}
        if value:
            key, _, raw = value.partition('=')
            if key == 'q':
                kwargs['quantity'] = int(raw)
            elif key == 'c':
                kwargs['selected_choice_name'] = raw
            elif key == 'e':
                kwargs['enabled'] = raw == '1'
            else:
                raise ValueError(f"Unknown selection key '{key}' in {part!r}")
        selections.append(OptionSelection(option_id=int(option_id), **kwargs))
    return selections


# (selections, base_price, description)
CASES = [
    ("1:q=3;2:c=Large", "0", "Bedrooms and large home"),
    ("1:q=3;2:c=Large;3:e=1", "0", "Eco products enabled"),
    ("1:q=3;2:c=Large;3:e=1;4", "0", "Pet fee on by default"),
    ("1:q=0;2:c=Small", "0", "Zero bedrooms"),
    ("1:q=2;2:c=Small;3:e=1", "0", "Percentage on small home"),
    ("1:q=1;2:c=Small;3:e=1", "0", "Percentage on one bedroom"),
    ("1:q=3;2:c=Small;4:e=0", "0", "Pet fee switched off"),
    ("1:q=1;2:c=Small;3:e=1", "100", "Base price included in subtotal"),
    ("2:c=Large", "0", "Bedrooms missing"),
    ("1:q=3;2:c=Medium", "0", "Unknown home size"),
    ("1:q=-1;2:c=Small", "0", "Negative bedrooms"),
    ("1:q=1;2:c=Small;5:q=1", "0", "Inactive oven option"),
    ("1:q=1;2:c=Small;1:q=2", "0", "Bedrooms selected twice"),
]


def generate_golden_cases():
    settings = get_settings()
    engine = PricingEngine(settings)
    service = load_service(settings.service_file)

    cases = []
    for i, (notation, base_price, description) in enumerate(CASES, start=1):
        outcome = engine.calculate(service.options, parse_selections(notation), base_price)
        row = {
            'case_id': f"GC{i:02d}",
            'selections': notation,
            'base_price': base_price,
            'expected_subtotal': '',
            'expected_total': '',
            'expected_error': '',
            'description': description,
        }
        if isinstance(outcome, CalculationError):
            row['expected_error'] = outcome.code
        else:
            row['expected_subtotal'] = str(outcome.subtotal)
            row['expected_total'] = str(outcome.total)
        cases.append(row)

    df = pd.DataFrame(cases)
    output_path = os.path.join(os.path.dirname(os.path.abspath(__file__)), 'golden_cases.csv')
    df.to_csv(output_path, index=False)
    print(f"Generated {len(cases)} golden test cases")
    print(f"Output: {output_path}")
    print()
    print(df.to_string(index=False))


if __name__ == "__main__":
    generate_golden_cases()
