"""Orders management CLI.

Creates and drops the database schema, and seeds a small demo directory.

Usage:
    python src/manage.py setup-db    # Create all tables
    python src/manage.py drop-db     # Drop all tables
    python src/manage.py seed-demo   # Add demo accounts and print their tokens
"""

import argparse
import sys


def setup_database():
    from orders.domain import orders
    from orders.utils.db import setup_db

    print("Initializing orders domain...")
    orders.init()
    touched = setup_db(orders)
    if touched:
        print(f"  Schema ready on: {', '.join(touched)}")
    else:
        print("  No relational database configured; nothing to create.")
    print("Done.")


def drop_database():
    from orders.domain import orders
    from orders.utils.db import drop_db

    print("Initializing orders domain...")
    orders.init()
    touched = drop_db(orders)
    if touched:
        print(f"  Schema dropped on: {', '.join(touched)}")
    else:
        print("  No relational database configured; nothing to drop.")
    print("Done.")


def seed_demo():
    """Create one account of each kind plus a small menu; returns bearer tokens by kind."""
    from protean.utils.globals import current_domain

    from orders.access import get_identity
    from orders.directory.customer import Customer
    from orders.directory.menu_item import MenuItem
    from orders.directory.restaurant import Restaurant
    from orders.directory.staff import Admin, Driver
    from orders.domain import orders

    orders.init()
    with orders.domain_context():
        customer = Customer(first_name="Asha", last_name="Rao", email="asha@example.com", city="Bengaluru")
        restaurant = Restaurant(
            business_name="Spice Route",
            first_name="Vikram",
            last_name="Shah",
            email="owner@spiceroute.example.com",
            city="Bengaluru",
            is_approved=True,
        )
        admin = Admin(name="Ops Admin", email="ops@example.com")
        driver = Driver(first_name="Ravi", phone="9800000000", is_approved=True)
        for record in (customer, restaurant, admin, driver):
            current_domain.repository_for(type(record)).add(record)

        menu = [
            ("Veg Thali", 120.0, "Meals"),
            ("Masala Dosa", 80.0, "Breakfast"),
            ("Mango Lassi", 60.0, "Beverages"),
        ]
        for name, price, category in menu:
            current_domain.repository_for(MenuItem).add(
                MenuItem(restaurant_id=str(restaurant.id), name=name, price=price, category=category)
            )

        identity = get_identity()
        return {
            "user": identity.issue_token(str(customer.id)),
            "restaurant": identity.issue_token(str(restaurant.id)),
            "admin": identity.issue_token(str(admin.id)),
            "driver": identity.issue_token(str(driver.id)),
        }


def main():
    parser = argparse.ArgumentParser(description="Orders management")
    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("setup-db", help="Create all database tables")
    subparsers.add_parser("drop-db", help="Drop all database tables")
    subparsers.add_parser("seed-demo", help="Create demo accounts and menu items")

    args = parser.parse_args()

    if args.command == "setup-db":
        setup_database()
    elif args.command == "drop-db":
        drop_database()
    elif args.command == "seed-demo":
        for kind, token in seed_demo().items():
            print(f"{kind:<11} {token}")
    else:
        parser.print_help()
        sys.exit(1)


if __name__ == "__main__":
    main()
