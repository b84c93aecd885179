import asyncio

from websql import close_all, open_database


def on_error(error):
    print("transaction failed:", error)


async def run():
    db = open_database("notes")

    def create(tx):
        tx.execute_sql(
            "CREATE TABLE IF NOT EXISTS notes "
            "(id INTEGER PRIMARY KEY, body TEXT NOT NULL)"
        )
        tx.execute_sql(
            "INSERT INTO notes (body) VALUES (?)",
            ["remember the milk"],
            lambda tx, rs: print("inserted note", rs.insertId),
        )

    def show(tx):
        tx.execute_sql(
            "SELECT * FROM notes ORDER BY id",
            [],
            lambda tx, rs: [print(row) for row in rs.rows],
        )

    db.transaction(create, on_error, lambda: print("committed"))
    db.readTransaction(show, on_error)
    await close_all()


asyncio.run(run())
