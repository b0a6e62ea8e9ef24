"""Processor commands: inspect realizations and run the deployment protocol."""

from typing import Annotated

import typer
from rich.table import Table

from trifonius.cli.utils import (
    EXIT_NOT_FOUND,
    console,
    get_engine,
    handle_errors,
    output_format,
    print_output,
    run,
)
from trifonius.kernel.exceptions import ValidationError
from trifonius.kernel.identifiers import JunctionId, ParameterId, PipelineId, ProcessorId
from trifonius.processor.models import service_name
from trifonius.resource.models import ResourceIdentifier, ResourceType

app = typer.Typer(no_args_is_help=True)

RealizationArg = Annotated[
    str, typer.Argument(help="Processor realization, as '<id>' or '<id>:<technology>'")
]
ProcessorIdArg = Annotated[str, typer.Argument(help="Processor id within the pipeline")]
PipelineOpt = Annotated[
    str | None, typer.Option("--pipeline", "-p", help="Pipeline the processor belongs to")
]


def _parse_bindings(values: list[str], option: str) -> dict[JunctionId, list[ResourceIdentifier]]:
    """Parse ``junction=resource[,resource...]`` options.

    Resources are ``<id>:<type>`` or a bare topic id.
    """
    bindings: dict[JunctionId, list[ResourceIdentifier]] = {}
    for value in values:
        junction, sep, resources = value.partition("=")
        if not sep or not resources:
            raise ValidationError(option, "expected '<junction>=<resource>[,<resource>...]'", value)
        bound = bindings.setdefault(JunctionId(junction), [])
        for resource in resources.split(","):
            if ":" in resource:
                bound.append(ResourceIdentifier.parse(resource))
            else:
                bound.append(ResourceIdentifier(ResourceType.DSH_TOPIC, resource))
    return bindings


def _parse_parameters(values: list[str]) -> dict[ParameterId, str]:
    parameters: dict[ParameterId, str] = {}
    for value in values:
        key, sep, parameter_value = value.partition("=")
        if not sep:
            raise ValidationError("--param", "expected '<parameter>=<value>'", value)
        parameters[ParameterId(key)] = parameter_value
    return parameters


@app.command("list")
def list_processors(ctx: typer.Context) -> None:
    """List all processor realizations."""
    with handle_errors():
        engine = get_engine(ctx)
        descriptors = engine.processor_registry.processor_descriptors(engine.target)

    if output_format(ctx) != "pretty":
        print_output([d.to_dict() for d in descriptors], ctx)
        return

    table = Table(title="Processors", show_header=True, header_style="bold magenta")
    table.add_column("Identifier", style="cyan", no_wrap=True)
    table.add_column("Label", style="green")
    table.add_column("Version", style="yellow")
    table.add_column("Description", style="white")
    for descriptor in descriptors:
        table.add_row(
            f"{descriptor.id}:{descriptor.technology}",
            descriptor.label,
            descriptor.version or "",
            descriptor.description,
        )
    console.print(table)


@app.command("show")
def show_processor(ctx: typer.Context, realization: RealizationArg) -> None:
    """Show junctions, parameters and profiles of a processor realization."""
    with handle_errors():
        engine = get_engine(ctx)
        processor_realization = engine.processor_realization(realization)
        identifier = processor_realization.identifier
        descriptor = processor_realization.descriptor(engine.target)

    if output_format(ctx) != "pretty":
        print_output(descriptor.to_dict(), ctx)
        return

    console.print(f"[bold cyan]{identifier}[/bold cyan] {descriptor.label}")
    console.print(descriptor.description)
    for key, value in descriptor.metadata:
        console.print(f"  [dim]{key}:[/dim] {value}")

    junctions = Table(title="Junctions", show_header=True, header_style="bold magenta")
    junctions.add_column("Id", style="cyan", no_wrap=True)
    junctions.add_column("Direction", style="green")
    junctions.add_column("Required")
    junctions.add_column("Resource types", style="yellow")
    junctions.add_column("Label")
    for junction in (*descriptor.inbound_junctions, *descriptor.outbound_junctions):
        junctions.add_row(
            junction.id,
            junction.direction,
            "yes" if junction.required else "no",
            ", ".join(junction.allowed_resource_types),
            junction.label,
        )
    console.print(junctions)

    if descriptor.deployment_parameters:
        parameters = Table(title="Parameters", show_header=True, header_style="bold magenta")
        parameters.add_column("Id", style="cyan", no_wrap=True)
        parameters.add_column("Type", style="green")
        parameters.add_column("Default", style="yellow")
        parameters.add_column("Options")
        parameters.add_column("Label")
        for parameter in descriptor.deployment_parameters:
            parameters.add_row(
                parameter.id,
                parameter.type,
                parameter.default or ("" if parameter.optional else "[red]required[/red]"),
                ", ".join(parameter.options or ()),
                parameter.label,
            )
        console.print(parameters)

    if descriptor.profiles:
        profiles = Table(title="Profiles", show_header=True, header_style="bold magenta")
        profiles.add_column("Id", style="cyan", no_wrap=True)
        profiles.add_column("Cpus")
        profiles.add_column("Mem")
        profiles.add_column("Instances")
        profiles.add_column("Label")
        for profile in descriptor.profiles:
            profiles.add_row(
                f"{profile.id} (default)" if profile.is_default else profile.id,
                str(profile.cpus),
                str(profile.mem),
                str(profile.instances),
                profile.label,
            )
        console.print(profiles)


@app.command("compatible")
def compatible(
    ctx: typer.Context,
    realization: RealizationArg,
    processor_id: ProcessorIdArg,
    junction: Annotated[str, typer.Argument(help="Junction id")],
) -> None:
    """List the resources that can be bound to a junction."""
    with handle_errors():
        engine = get_engine(ctx)
        instance = engine.processor_instance(realization, None, processor_id)
        resources = run(engine, instance.compatible_resources(JunctionId(junction)))

    if output_format(ctx) != "pretty":
        print_output([str(r) for r in resources], ctx)
        return
    for resource in resources:
        console.print(str(resource))


@app.command("deploy")
def deploy(
    ctx: typer.Context,
    realization: RealizationArg,
    processor_id: ProcessorIdArg,
    pipeline: PipelineOpt = None,
    inbound: Annotated[
        list[str] | None,
        typer.Option("--inbound", "-i", help="Inbound binding '<junction>=<resource>[,...]'"),
    ] = None,
    outbound: Annotated[
        list[str] | None,
        typer.Option("--outbound", "-o", help="Outbound binding '<junction>=<resource>[,...]'"),
    ] = None,
    param: Annotated[
        list[str] | None, typer.Option("--param", "-P", help="Parameter '<id>=<value>'")
    ] = None,
    profile: Annotated[str | None, typer.Option("--profile", help="Deployment profile")] = None,
    dry_run: Annotated[
        bool, typer.Option("--dry-run", help="Print the service configuration, do not deploy")
    ] = False,
) -> None:
    """Deploy a processor instance."""
    with handle_errors():
        engine = get_engine(ctx)
        instance = engine.processor_instance(realization, pipeline, processor_id)
        inbound_bindings = _parse_bindings(inbound or [], "--inbound")
        outbound_bindings = _parse_bindings(outbound or [], "--outbound")
        parameters = _parse_parameters(param or [])
        if dry_run:
            configuration = run(
                engine,
                instance.deploy_dry_run(inbound_bindings, outbound_bindings, parameters, profile),
            )
        else:
            run(engine, instance.deploy(inbound_bindings, outbound_bindings, parameters, profile))

    if dry_run:
        if output_format(ctx) == "pretty":
            console.print(f"[bold]Service[/bold] [cyan]{instance.service_name}[/cyan]")
        print_output(configuration, ctx)
    else:
        console.print(f"[green]✓[/green] Deployed [cyan]{instance.service_name}[/cyan]")


def _lifecycle(
    ctx: typer.Context, realization: str, processor_id: str, pipeline: str | None, operation: str
) -> None:
    with handle_errors():
        engine = get_engine(ctx)
        instance = engine.processor_instance(realization, pipeline, processor_id)
        match operation:
            case "start":
                done = run(engine, instance.start())
            case "stop":
                done = run(engine, instance.stop())
            case _:
                done = run(engine, instance.undeploy())
    if not done:
        console.print(f"[yellow]Service {instance.service_name} is not deployed[/yellow]")
        raise typer.Exit(EXIT_NOT_FOUND)
    done_label = {"start": "Started", "stop": "Stopped"}.get(operation, "Undeployed")
    console.print(f"[green]✓[/green] {done_label} [cyan]{instance.service_name}[/cyan]")


@app.command("start")
def start(
    ctx: typer.Context,
    realization: RealizationArg,
    processor_id: ProcessorIdArg,
    pipeline: PipelineOpt = None,
) -> None:
    """Start a deployed processor instance."""
    _lifecycle(ctx, realization, processor_id, pipeline, "start")


@app.command("stop")
def stop(
    ctx: typer.Context,
    realization: RealizationArg,
    processor_id: ProcessorIdArg,
    pipeline: PipelineOpt = None,
) -> None:
    """Stop a deployed processor instance."""
    _lifecycle(ctx, realization, processor_id, pipeline, "stop")


@app.command("undeploy")
def undeploy(
    ctx: typer.Context,
    realization: RealizationArg,
    processor_id: ProcessorIdArg,
    pipeline: PipelineOpt = None,
) -> None:
    """Remove a deployed processor instance."""
    _lifecycle(ctx, realization, processor_id, pipeline, "undeploy")


@app.command("status")
def status(
    ctx: typer.Context,
    realization: RealizationArg,
    processor_id: ProcessorIdArg,
    pipeline: PipelineOpt = None,
) -> None:
    """Show whether a deployed processor instance is up."""
    with handle_errors():
        engine = get_engine(ctx)
        instance = engine.processor_instance(realization, pipeline, processor_id)
        processor_status = run(engine, instance.status())

    if output_format(ctx) != "pretty":
        print_output({"service": str(instance.service_name), "up": processor_status.up}, ctx)
        return
    color = "green" if processor_status.up else "red"
    console.print(f"{instance.service_name}: [{color}]{processor_status}[/{color}]")


@app.command("service-name")
def show_service_name(processor_id: ProcessorIdArg, pipeline: PipelineOpt = None) -> None:
    """Print the platform service name of a processor instance."""
    with handle_errors():
        name = service_name(
            PipelineId(pipeline) if pipeline is not None else None, ProcessorId(processor_id)
        )
    typer.echo(name)
