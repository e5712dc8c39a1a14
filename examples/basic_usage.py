"""
Example: Basic worksheet usage with sheet_ds
============================================

This example shows how to treat a worksheet as a table.
"""

from datetime import datetime

from sheet_ds import FeedAuth, FeedConfig, SheetFeedSession, SheetAdapter
from sheet_ds.sheets import Collection, Condition, Model, Property, Query, Serial

CREW = Model(
    "CrewMember",
    [
        Serial("id"),
        Property("name"),
        Property("times_a_lady", int),
        Property("created_at", datetime, default=datetime.utcnow),
    ],
    storage_name="crew",
)


def example_basic_crud():
    """Create a worksheet, add rows, query, update, and delete."""

    cfg = FeedConfig(
        spreadsheet_url="https://spreadsheets.google.com/feeds/spreadsheets/private/full/KEY",
        auth=FeedAuth("authsub", "TOKEN"),
    )

    with SheetFeedSession(cfg) as sess:
        adapter = SheetAdapter(sess)
        adapter.auto_migrate(CREW)

        mike = CREW.new(name="Mike Nelson", times_a_lady=8)
        tom = CREW.new(name="Tom Servo", times_a_lady=100)
        adapter.create([mike, tom])
        print("Assigned ids:", mike["id"], tom["id"])

        lt10 = Condition(CREW.get_property("times_a_lady"), "lt", 10)
        rows = adapter.read(Query(CREW, conditions=[lt10]))
        print("Fewer than 10:", [CREW.load(r) for r in rows])

        mike.attribute_set("times_a_lady", 4)
        adapter.update({CREW.get_property("times_a_lady"): 4}, Collection(CREW, [mike]))

        adapter.delete(Collection(CREW, [tom]))


def example_connection_context():
    """Using ConnectionContext."""
    from sheet_ds import ConnectionContext

    # Reads from environment variables: GSHEET_URL, GSHEET_TOKEN, GSHEET_AUTH_SCHEME
    with ConnectionContext() as conn:
        adapter = conn.get_adapter()
        print("crew exists:", adapter.storage_exists("crew"))


if __name__ == "__main__":
    # Uncomment the example you want to run
    # example_basic_crud()
    # example_connection_context()

    print("Set up your environment variables and uncomment an example to run.")
    print("Required: GSHEET_URL, GSHEET_TOKEN")
