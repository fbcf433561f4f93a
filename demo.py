#!/usr/bin/env python
import os

from sdk.pystore import StoreClient


def main():
    c = StoreClient(base_url=os.getenv("STORE_API_URL", "http://127.0.0.1:8085"))

    # -----------------------------
    # Seeded products
    # -----------------------------
    print("Listing products...")
    print(c.list_products())

    # -----------------------------
    # Rejected create (price below 0.01)
    # -----------------------------
    print("\nCreating a product with price 0.00...")
    print(c.create_product("Plush Squirrel", "0.00"))

    # -----------------------------
    # Create
    # -----------------------------
    print("\nCreating 'Plush Squirrel' at 12.99...")
    created = c.create_product("Plush Squirrel", "12.99")
    print(created)
    print(c.get_product(created["id"]))

    # -----------------------------
    # Update
    # -----------------------------
    print("\nRaising the price of 'Knotted Rope' to 14.99...")
    print(c.update_product(2, "Knotted Rope", "14.99") or "updated")
    print(c.get_product(2))

    # -----------------------------
    # Delete
    # -----------------------------
    print("\nDeleting product 1...")
    print("deleted" if c.delete_product(1) else "not found")
    print(c.list_products())


if __name__ == "__main__":
    main()
