"""Example usage of Dexcom Share API Client"""

import logging

from dexcom_share_client import DexcomShareClient, ShareAuthenticationError, ShareError
from dexcom_share_client.config import get_share_config

logging.basicConfig(level=logging.INFO, format='%(asctime)s - %(name)s - %(levelname)s - %(message)s')

try:
    config = get_share_config()
except ValueError as e:
    print(f"❌ {e}")
    print("   Please copy config.yaml.example to config.yaml and fill in your credentials")
    exit(1)

print("Initializing Dexcom Share Client...")
client = DexcomShareClient(**config)

try:
    # Example 1: Latest reading
    print("\n=== Latest glucose reading ===")
    latest = client.get_latest_reading()
    if latest is None:
        print("  No reading in the last 10 minutes")
    else:
        print(f"  Value: {latest.value} mg/dL ({latest.mmol_l} mmol/L)")
        print(f"  Trend: {latest.trend} {latest.trend_arrow}")
        print(f"  Date: {latest.timestamp.strftime('%Y-%m-%d %H:%M:%S')} UTC")

    # Example 2: Last 3 hours, the session from Example 1 is reused
    print("\n=== Last 3 hours ===")
    readings = client.get_readings(minutes=180, max_count=36)
    print(f"  {len(readings)} readings available")
    for i, reading in enumerate(readings[:5], 1):
        print(f"  {i}. {reading}")

except ShareAuthenticationError as e:
    print(f"\n❌ Error: {e}")
    print("\n⚠️  Use the credentials of the Dexcom account sharing its data,")
    print("   and make sure Share is enabled with at least one follower.")
    exit(1)
except ShareError as e:
    print(f"\n❌ Error: {e}")
    exit(1)
finally:
    client.close()
