#!/usr/bin/env python3
"""
Career Clarified - Profile tier CLI

Change a user's subscription tier, or grant/revoke blog admin rights.

Usage:
    python scripts/set_tier.py user@email.com pro            # set tier
    python scripts/set_tier.py user@email.com --admin        # grant admin
    python scripts/set_tier.py user@email.com --no-admin     # revoke admin
"""
import sys
import os

# Add project root to path so we can import app modules
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from careerclarified.database import get_resilient_session
from careerclarified.models import Profile
from careerclarified.services.quota import TIER_LIMITS, TIER_NAMES


def set_tier(email: str, tier: str = None, admin: bool = None):
    with get_resilient_session() as db:
        profile = db.query(Profile).filter(Profile.email == email).first()
        if not profile:
            print(f"Error: No profile found with email '{email}'")
            sys.exit(1)

        if tier is not None:
            if tier not in TIER_LIMITS:
                print(f"Error: Unknown tier '{tier}'. Choose from: {', '.join(TIER_LIMITS)}")
                sys.exit(1)
            profile.tier = tier
            print(f"{email} is now on {TIER_NAMES[tier]} ({tier}), {TIER_LIMITS[tier]} AI calls/day.")

        if admin is not None:
            profile.is_admin = admin
            print(f"{email} admin: {'yes' if admin else 'no'}")


if __name__ == "__main__":
    args = sys.argv[1:]
    if len(args) != 2:
        print("Usage: python scripts/set_tier.py <email> <free|pro|ultimate|--admin|--no-admin>")
        sys.exit(1)

    email, option = args
    if option == "--admin":
        set_tier(email, admin=True)
    elif option == "--no-admin":
        set_tier(email, admin=False)
    else:
        set_tier(email, tier=option.lower())
