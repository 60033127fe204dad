"""
Seed the database with demo data.

Creates two regular clients, one admin, 20 users spread randomly across the
regular clients and 20 products. Every account uses the password "password".

Usage:
    python scripts/load_fixtures.py
"""
import random
import sys
import os
from sqlmodel import Session, select

# Add current directory to path
sys.path.append(os.getcwd())

from bilemo.db.session import engine, init_db
from bilemo.models import Client, ClientRole, Product, User
from bilemo.core.security import get_password_hash

PASSWORD = "password"


def load_fixtures():
    print("--- Loading fixtures ---")
    init_db()

    with Session(engine) as session:
        if session.exec(select(Client).where(Client.email == "admin@apibilemo.com")).first():
            print("Fixtures already loaded.")
            return

        password_hash = get_password_hash(PASSWORD)

        clients = []
        for i in range(1, 3):
            client = Client(
                name=str(i),
                email=f"client{i}@apibilemo.com",
                password=password_hash,
                roles=[ClientRole.USER],
            )
            session.add(client)
            clients.append(client)

        session.add(Client(
            name="admin",
            email="admin@apibilemo.com",
            password=password_hash,
            roles=[ClientRole.ADMIN],
        ))
        session.flush()  # assign client ids

        for j in range(20):
            session.add(User(
                username=f"name{j}",
                comment=f"comment{j}",
                client_id=random.choice(clients).id,
            ))

        for k in range(20):
            session.add(Product(
                title=f"title{k}",
                price=random.randint(0, 100),
                description=f"description{k}",
                features=f"features{k}",
                text=f"text{k}",
            ))

        session.commit()

    print("Fixtures loaded successfully!")
    print("Clients: client1@apibilemo.com, client2@apibilemo.com, admin@apibilemo.com")
    print(f"Password: {PASSWORD}")


if __name__ == "__main__":
    load_fixtures()
