"""
entitysearch: End-to-End Search Example.

This script demonstrates a complete workflow:
1. Connecting to the entity service and listing the exposed entity types.
2. Loading the schema of one entity and inspecting its searchable fields.
3. Filling the search form from typed values and raw text, then running the query.
4. Moving the result set into a pandas DataFrame for further analysis.
"""

import logging as log
import sys

from rich.console import Console
from rich.panel import Panel

from entitysearch import EntityClient, EntitySearchHandler, EntitySearchError

# Configuration Constants
SERVICE_HOST = "localhost"
SERVICE_PORT = 7070
SESSION_USER = "admin"
ENTITY_NAME = "user"

# Initialize Rich Console for terminal output
console = Console()


def run_search():
    """
    Executes the search workflow against a running service.
    """
    with EntityClient.connect(host=SERVICE_HOST, port=SERVICE_PORT) as client:
        # --- PHASE 1: Discovery ---
        console.print(Panel("[bold green]Phase 1: Discovering entities[/bold green]"))
        try:
            entities = client.list_entities()
        except (ConnectionError, EntitySearchError) as e:
            console.print(f"[bold red]Discovery Failed:[/bold red] {e}")
            sys.exit(1)
        for name in entities:
            console.print(f"  - {name}")

        # --- PHASE 2: Schema ---
        console.print(Panel(f"[bold green]Phase 2: Loading '{ENTITY_NAME}' schema[/bold green]"))
        handler = EntitySearchHandler(client, ENTITY_NAME)
        if not handler.load_metadata():
            console.print(f"[bold red]Error:[/bold red] {handler.error}")
            sys.exit(1)
        for sfield in handler.search_fields:
            console.print(f"• [bold]{sfield.name}[/bold]: {sfield.type}")

        # --- PHASE 3: Search ---
        console.print(Panel("[bold green]Phase 3: Searching[/bold green]"))
        # Typed values and raw form input can be mixed
        handler.set_value("id", 1)
        handler.set_text("email", "a@b.com")
        console.print(f"• [bold]Query:[/bold] {handler.build_query()}")

        result = handler.search(user=SESSION_USER)
        if result is None:
            console.print(f"[bold red]Search Failed:[/bold red] {handler.error}")
            sys.exit(1)

        # --- PHASE 4: Analysis ---
        df = result.to_pandas()
        console.print(f"• [bold]Rows Found:[/bold] {len(df)}")
        console.print(df)


if __name__ == "__main__":
    # Setup simple logging for background package processes
    log.basicConfig(level=log.INFO)
    run_search()
