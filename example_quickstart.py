"""
Pagewalk Quick Start Example

Browse a small in-memory collection page by page, the same way you would
browse a MongoDB collection.

Features covered:
- Configure a query
- Page forward and back
- Jump to a visited page
- Search within the current page
- Load-more feeds

Run with: python example_quickstart.py
"""

import asyncio

from pagewalk import (
    CursorFeed,
    Filter,
    MemoryCollectionSource,
    PaginationEngine,
    QuerySpec,
    SortDirection,
    between_dates,
    page_links,
)


STUDENTS = [
    {"id": f"s{i:02d}", "name": name, "strand": strand, "createdAt": f"2024-06-{i:02d}T08:00:00.000"}
    for i, (name, strand) in enumerate(
        [
            ("Alice Reyes", "STEM"),
            ("Ben Cruz", "ABM"),
            ("Carla Santos", "STEM"),
            ("Dan Lim", "HUMSS"),
            ("Elena Garcia", "STEM"),
            ("Felix Tan", "ABM"),
            ("Gina Cruz", "STEM"),
        ],
        1,
    )
]


def show(state):
    names = ", ".join(item["name"] for item in state.items) or "(nothing)"
    print(f"   Page {state.current_page}: {names}")
    print(f"   {state.item_range}  links={page_links(state.current_page, state.total_pages)}")
    if state.error:
        print(f"   Error: {state.error}")


async def main():
    """Run the quickstart example."""

    source = MemoryCollectionSource(STUDENTS, name="students")
    engine = PaginationEngine(source)
    spec = QuerySpec(
        order_by_field="createdAt",
        order_direction=SortDirection.DESCENDING,
        page_size=3,
        search_fields=frozenset({"name", "strand"}),
    )

    # ====== CONFIGURE ======
    print("1️⃣  CONFIGURE - Newest students first")
    show(await engine.configure(spec))

    # ====== NEXT ======
    print("\n2️⃣  NEXT - Walking forward")
    show(await engine.next_page())
    show(await engine.next_page())

    # ====== PREVIOUS ======
    print("\n3️⃣  PREVIOUS - Going back uses the remembered cursor")
    show(await engine.previous_page())

    # ====== JUMP ======
    print("\n4️⃣  JUMP - Back to page 1")
    show(await engine.go_to_page(1))

    # ====== SEARCH ======
    print("\n5️⃣  SEARCH - Matching 'stem' on the current page")
    show(await engine.configure(engine.spec.with_search("stem")))

    # ====== FILTER ======
    print("\n6️⃣  FILTER - Only ABM students (starts over at page 1)")
    show(await engine.configure(spec.with_filters(Filter("strand", "==", "ABM"))))

    # ====== JUMP TOO FAR ======
    print("\n7️⃣  JUMP - Page 3 of a fresh query has no cursor yet")
    await engine.configure(spec)
    show(await engine.go_to_page(3))

    # ====== FEED ======
    print("\n8️⃣  FEED - Load more, limited to a date range")
    feed = CursorFeed(source, spec.with_filters(*between_dates("createdAt", "2024-06-02", "2024-06-06")))
    await feed.reset()
    while feed.state.has_more:
        await feed.load_more()
    print(f"   Loaded {feed.state.total_loaded}: {', '.join(s['name'] for s in feed.state.items)}")

    print("\n✅ All operations completed successfully!")


if __name__ == "__main__":
    print("\n" + "=" * 60)
    print("PAGEWALK QUICKSTART EXAMPLE")
    print("=" * 60 + "\n")

    asyncio.run(main())
