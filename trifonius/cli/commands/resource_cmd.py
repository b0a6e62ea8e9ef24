"""Resource commands."""

from typing import Annotated

import typer
from rich.table import Table

from trifonius.cli.utils import console, get_engine, handle_errors, output_format, print_output, run
from trifonius.resource.models import ResourceType

app = typer.Typer(no_args_is_help=True)


@app.command("list")
def list_resources(
    ctx: typer.Context,
    resource_type: Annotated[
        ResourceType | None, typer.Option("--type", "-t", help="Only list this resource type")
    ] = None,
    with_status: Annotated[
        bool, typer.Option("--status", help="Also ask the platform for each resource's status")
    ] = False,
) -> None:
    """List resources, optionally with their platform status."""
    with handle_errors():
        engine = get_engine(ctx)
        registry = engine.resource_registry
        if with_status:

            async def _query():
                client = await engine.target.client()
                if resource_type is None:
                    return await registry.resource_descriptors_with_status(client)
                return await registry.resource_descriptors_by_type_with_status(
                    resource_type, client
                )

            rows = run(engine, _query())
        else:
            descriptors = (
                registry.resource_descriptors()
                if resource_type is None
                else registry.resource_descriptors_by_type(resource_type)
            )
            rows = [(descriptor, None) for descriptor in descriptors]

    if output_format(ctx) != "pretty":
        data = []
        for descriptor, status in rows:
            entry = {
                "identifier": str(descriptor.identifier),
                "label": descriptor.label,
                "description": descriptor.description,
                "topic": descriptor.dsh_topic.topic if descriptor.dsh_topic else None,
            }
            if with_status:
                entry["status"] = str(status) if status is not None else "not found"
            data.append(entry)
        print_output(data, ctx)
        return

    table = Table(title="Resources", show_header=True, header_style="bold magenta")
    table.add_column("Identifier", style="cyan", no_wrap=True)
    table.add_column("Label", style="green")
    table.add_column("Topic", style="yellow")
    if with_status:
        table.add_column("Status")
    for descriptor, status in rows:
        row = [
            str(descriptor.identifier),
            descriptor.label,
            descriptor.dsh_topic.topic if descriptor.dsh_topic else "",
        ]
        if with_status:
            if status is None:
                row.append("[red]not found[/red]")
            else:
                row.append(f"[green]{status}[/green]" if status.up else f"[red]{status}[/red]")
        table.add_row(*row)
    console.print(table)


@app.command("types")
def list_resource_types(ctx: typer.Context) -> None:
    """List the supported resource types."""
    with handle_errors():
        types = get_engine(ctx).resource_registry.resource_types()
    if output_format(ctx) != "pretty":
        print_output(
            [
                {"type": str(t.resource_type), "label": t.label, "description": t.description}
                for t in types
            ],
            ctx,
        )
        return
    for t in types:
        console.print(f"[cyan]{t.resource_type}[/cyan] {t.label}: {t.description}")
