"""Load demo golfers and tee times into the database.
    python3 data/load_demo_data.py data/demo_data.json

The schema is created first if it does not exist. Users are matched by email
and TTRs by (course, date, time), so the script can be re-run safely.
"""

import asyncio
import json
import os
import sys
from datetime import date, time

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from auth import hash_password
from database.connection import DatabasePool
from database.db_manager import DatabaseManager
from models import User
from services import InvitationService, NotificationService, TTRService


async def load_data(data_path: str, dsn: str = None):
    with open(data_path) as f:
        data = json.load(f)

    print(f"Loaded {len(data['users'])} users, {len(data['ttrs'])} TTRs from JSON")

    pool = DatabasePool()
    await pool.initialize(dsn=dsn)
    db = DatabaseManager(pool.pool)

    try:
        await db.initialize_schema()

        # 1. Create or find users
        user_map = {}  # email -> User
        for u_data in data["users"]:
            email = u_data["email"]
            user = await db.users.get_user_by_email(email)
            if user:
                print(f"  User exists: {user.full_name} ({user.id})")
            else:
                user = await db.users.create_user(User(
                    email=email,
                    first_name=u_data["first_name"],
                    last_name=u_data["last_name"],
                    handicap=u_data.get("handicap"),
                    password_hash=hash_password(u_data.get("password", "password123")),
                ))
                print(f"  Created user: {user.full_name} ({user.id})")
            user_map[email] = user

        # 2. Create TTRs and send their invitations
        ttr_service = TTRService(db.ttrs, db.users)
        invitation_service = InvitationService(
            db.invitations, db.ttrs, db.users, NotificationService(db.notifications)
        )
        captain_ids = {u.id for u in user_map.values()}
        existing = {
            (t.course_name, t.tee_date, t.tee_time)
            for uid in captain_ids
            for t in await db.ttrs.list_for_user(uid)
        }

        created = skipped = 0
        for t_data in data["ttrs"]:
            tee_date = date.fromisoformat(t_data["tee_date"])
            tee_time = time.fromisoformat(t_data["tee_time"])
            if (t_data["course_name"], tee_date, tee_time) in existing:
                print(f"  EXISTS: {t_data['course_name']} {tee_date} {tee_time} - skipping")
                skipped += 1
                continue

            captain = user_map[t_data["captain"]]
            ttr = await ttr_service.create_ttr(
                captain.id,
                t_data["course_name"],
                tee_date,
                tee_time,
                t_data.get("max_players", 4),
                course_location=t_data.get("course_location"),
                notes=t_data.get("notes"),
            )
            for email in t_data.get("invite", []):
                await invitation_service.create_invitation(ttr.id, captain.id, user_map[email].id)
            created += 1
            print(f"  T{created}: {ttr.course_name} {ttr.tee_date} {ttr.tee_time} "
                  f"({len(t_data.get('invite', []))} invited)")

        print(f"\nDone: {created} TTRs created, {skipped} skipped")

    finally:
        await pool.close()


def main():
    if len(sys.argv) < 2:
        print("Usage: python data/load_demo_data.py <demo_data.json>")
        sys.exit(1)

    dsn = os.environ.get("DATABASE_URL")
    asyncio.run(load_data(sys.argv[1], dsn))


if __name__ == "__main__":
    main()
