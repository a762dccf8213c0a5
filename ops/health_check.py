import sys
from datetime import timedelta, datetime
from zoneinfo import ZoneInfo
from sales_dashboard.config import DashboardConfig
from adapters.mongo import MongoStoreClient

config = DashboardConfig.from_env()
tz = ZoneInfo(config.timezone)
since = datetime.now(tz) - timedelta(days=1)

healthy = True
for site in config.sites:
    with MongoStoreClient(site.name, site.mongo_uri, timezone=config.timezone,
                          timeout_ms=config.store_timeout_ms, retry_attempts=1) as client:
        status = client.ping()
        if status["status"] != "connected":
            print(f"{site.name}: store unreachable ({status.get('error')})"); healthy = False
            continue
        last = client.find("bills", {"date": {"$gte": since}}, {"_id": 0, "date": 1}, sort=[("date", -1)], limit=1)
        print(f"{site.name}: ok, last bill {last[0]['date'].isoformat() if last else 'none in 24h'}")

sys.exit(0 if healthy else 1)
