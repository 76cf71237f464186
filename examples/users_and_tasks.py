#!/usr/bin/env python3
"""Users and Tasks -- Collections, Inferred Links and Deferred Writes.

================================================================================
THE SCHEMA
================================================================================

rowlink needs no model classes. Relations come from names::

    Countries (id, iso_code)
    Users     (id, name, age, countriesId)   ← countriesId → Countries.id
    Tasks     (id, description)
    TasksUsers(id, tasksId, usersId)         ← junction: Tasks ⇄ Users

    user["countries"]   singular link, via the countriesId column
    user["tasks"]       multiple link, via the TasksUsers junction table
    task["users"]       the same junction read from the other side


================================================================================
WHAT THIS EXAMPLE SHOWS
================================================================================

    [1] Counting and iterating a table
    [2] Scalar reads on a one-row collection
    [3] Following singular and multiple links
    [4] Creating rows and linking them
    [5] Staged writes flushed by save()
    [6] Unlinking and deleting

Run:
    python examples/users_and_tasks.py
"""

from rowlink import Database, configure_logging

SCHEMA = """
CREATE TABLE Countries (id INTEGER PRIMARY KEY AUTOINCREMENT, iso_code TEXT);
CREATE TABLE Users (
    id INTEGER PRIMARY KEY AUTOINCREMENT, name TEXT, age INTEGER, countriesId INTEGER
);
CREATE TABLE Tasks (id INTEGER PRIMARY KEY AUTOINCREMENT, description TEXT);
CREATE TABLE TasksUsers (
    id INTEGER PRIMARY KEY AUTOINCREMENT, tasksId INTEGER, usersId INTEGER
);
INSERT INTO Countries (iso_code) VALUES ('SE'), ('JP');
INSERT INTO Users (name, age, countriesId) VALUES ('Ann', 30, 1), ('Bo', 40, 2);
INSERT INTO Tasks (description) VALUES ('Write report'), ('Review code');
INSERT INTO TasksUsers (tasksId, usersId) VALUES (1, 1), (2, 1), (2, 2);
"""


def main():
    configure_logging(level="WARNING")

    db = Database.connect("memory")
    db.conn.executescript(SCHEMA)

    print("=" * 60)
    print("Users and Tasks")
    print("=" * 60)

    # === 1. Counting and iterating ===
    print("\n[1] Counting and Iterating")

    users = db.all("Users")
    print(f"  Users: {len(users)}")
    for user in users.order("name"):
        print(f"  {user['name']} ({user['age']})")

    # === 2. Scalar reads ===
    print("\n[2] Scalar Reads")

    oldest = users.order("age", "DESC").limit(1)
    print(f"  Oldest user: {oldest['name']}")
    print(f"  Users over 35: {users.filter('age', '>', 35).count()}")

    # === 3. Following links ===
    print("\n[3] Following Links")

    country = users.limit(1)["countries"]
    print(f"  First user's country: {country['iso_code']}")
    for user in users:
        print(f"  {user['name']}:")
        for task in user["tasks"]:
            print(f"    - {task['description']}")

    # === 4. Creating and linking ===
    print("\n[4] Creating and Linking")

    fra = users.create_new({"name": "Francesco", "age": 23})
    fra.link(country)
    fra.link(db.all("Tasks").filter("id", "=", 1))
    # fra still holds the row as first read; a fresh collection sees the link
    francesco = users.filter("name", "=", "Francesco")
    print(f"  Created {francesco['name']} with id {francesco['id']}")
    print(f"  Country: {francesco['countries']['iso_code']}")
    print(f"  Tasks: {[task['description'] for task in francesco['tasks']]}")

    # === 5. Staged writes ===
    print("\n[5] Staged Writes")

    everyone = db.all("Users").order("id")
    for user in everyone:
        user["age"] = user["age"] + 1
    print(f"  Pending positions: {sorted(everyone.pending)}")
    print(f"  UPDATE statements: {everyone.save()}")
    print(f"  Ages now: {[user['age'] for user in db.all('Users').order('id')]}")

    # === 6. Unlinking and deleting ===
    print("\n[6] Unlinking and Deleting")

    fra.unlink(db.all("Tasks").filter("id", "=", 1))
    print(f"  Francesco's tasks: {fra['tasks'].count()}")
    print(f"  Deleted users: {db.all('Users').filter('name', '=', 'Francesco').delete()}")
    print(f"  Users left: {db.all('Users').count()}")

    db.close()

    print("\n" + "=" * 60)
    print("[OK] Users and Tasks Complete!")
    print("=" * 60)


if __name__ == "__main__":
    main()
