"""Example: use the service layer directly (without Flask).

Prints the current week's bars for one user, one line per bar.
"""

import importlib
from datetime import date

from config import get_settings_module

from src.workboard.workboard.container import build_container
from src.workboard.workboard.schedules.service import week_view_to_ui


def main():
    settings = importlib.import_module(get_settings_module())
    container = build_container(db_config=settings.DB_CONFIG)
    service = container.weekly_schedule_service()

    view = week_view_to_ui(service.load_week(user_id="u-alice", user_name="Alice Kim", day=date.today()))
    print(view["label"], view["range_label"])
    for bar in view["bars"]:
        print(f"  row {bar['row_index']}  day {bar['day_offset']}+{bar['day_span']}  {bar['name']}")


if __name__ == "__main__":
    main()
