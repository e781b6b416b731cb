#!/usr/bin/env python3
"""
Backend Connection Check Script

Quick script to check backend connectivity and table access without running the full pipeline.
"""

import sys
from pathlib import Path

# Add src to path
sys.path.insert(0, str(Path(__file__).parent / "src"))

from groundwater_eda.core import Config, setup_logger, constants
from groundwater_eda.api import RestAPI


def check_connection():
    """Check backend connection and read one row from each variable table."""
    print("=" * 60)
    print("Groundwater EDA Backend Connection Check")
    print("=" * 60)
    print()

    try:
        config = Config()
        print(f"✓ Configuration loaded from: {config.config_file}")
        print(f"  Backend URL: {config.api_base_url}")
        print()
    except Exception as e:
        print(f"✗ Failed to load configuration: {e}")
        print("\nMake sure you have:")
        print("  1. Copied config.json.example to config.json")
        print("  2. Set SUPABASE_URL and SUPABASE_ANON_KEY (or edited config.json)")
        return False

    logger = setup_logger(log_level="DEBUG")

    print("Checking backend connection...")
    print("-" * 60)

    try:
        api = RestAPI(
            base_url=config.api_base_url,
            anon_key=config.api_anon_key,
            schema=config.api_schema,
            timeout=config.api_timeout,
            max_retries=config.api_max_retries,
            logger=logger
        )
        print("✓ API client created")
        print()

        for variable, (table, code_field) in sorted(constants.VARIABLE_TABLES.items()):
            rows = api.table(table).range(0, 0).execute()
            sample = rows[0].get(code_field) if rows else None
            print(f"✓ {variable}: table {table} reachable (sample point: {sample})")

        rows = api.table(constants.METEO_TABLE).range(0, 0).execute()
        print(f"✓ meteo: table {constants.METEO_TABLE} reachable ({len(rows)} sample row)")
        print()

        api.close()

        print("=" * 60)
        print("✓ All backend checks passed successfully!")
        print("=" * 60)
        return True

    except Exception as e:
        print(f"\n✗ Backend check failed: {e}")
        print()
        import traceback
        traceback.print_exc()
        return False


def main():
    """Main entry point."""
    success = check_connection()
    sys.exit(0 if success else 1)


if __name__ == "__main__":
    main()
