#!/usr/bin/env python
"""
Quote a selection set against a service definition.

Usage:
    python scripts/quote_service.py [REQUEST_JSON] [--service SERVICE_JSON] [--trace]
"""
import argparse
import sys
from pathlib import Path

# Add src to path
src_path = Path(__file__).parent.parent / 'src'
sys.path.insert(0, str(src_path))

from cleaning_pricing.config.settings import configure_logging, get_settings
from cleaning_pricing.engine import CalculationError, PricingEngine
from cleaning_pricing.reporting.breakdown import format_breakdown
from cleaning_pricing.services.catalog_service import load_selections, load_service


def main():
    settings = get_settings()
    default_request = settings.service_file.parent / 'sample_request.json'

    parser = argparse.ArgumentParser(description="Price option selections for a cleaning service")
    parser.add_argument('request', nargs='?', default=str(default_request),
                        help="Pricing calculation request JSON")
    parser.add_argument('--service', default=str(settings.service_file),
                        help="Service definition JSON")
    parser.add_argument('--trace', action='store_true', help="Print the calculation trace")
    args = parser.parse_args()

    configure_logging(settings)

    service = load_service(Path(args.service))
    service_id, selections = load_selections(Path(args.request))
    if service_id != service.id:
        print(f"WARNING: request is for service {service_id}, pricing against {service.id}")

    outcome = PricingEngine(settings).calculate_service(service, selections)
    if isinstance(outcome, CalculationError):
        print(f"❌ {outcome.code}: {outcome}")
        sys.exit(1)

    print(f"{service.name}")
    print("=" * 60)
    print(format_breakdown(outcome))
    if args.trace:
        print()
        print(outcome.get_trace_text())


if __name__ == "__main__":
    main()
