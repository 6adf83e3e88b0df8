"""CLI entry point using Typer."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING, Annotated

import typer

if TYPE_CHECKING:
    from animgroups.collection import AnimationGroupCollection
    from animgroups.scene.memory import MemoryScene

app = typer.Typer(
    name="animgroups",
    help="Manage animation groups stored in a scene and sync them with JSON files.",
    no_args_is_help=True,
)

ScenePath = Annotated[Path, typer.Argument(help="Path to the scene snapshot JSON")]


def _fail(message: object) -> typer.Exit:
    typer.echo(f"Error: {message}", err=True)
    return typer.Exit(1)


def _open_scene(scene_path: Path) -> tuple[MemoryScene, AnimationGroupCollection]:
    from animgroups.collection import AnimationGroupCollection
    from animgroups.errors import AnimationGroupError
    from animgroups.scene.memory import MemoryScene, SceneLoadError

    try:
        scene = MemoryScene.load(scene_path)
    except SceneLoadError as e:
        raise _fail(e) from None
    groups = AnimationGroupCollection(scene)
    try:
        groups.load_from_store()
    except AnimationGroupError as e:
        raise _fail(e) from None
    return scene, groups


@app.command()
def init(
    scene_path: ScenePath,
    start: Annotated[int, typer.Option("--start", help="Timeline start frame")] = 0,
    end: Annotated[int, typer.Option("--end", help="Timeline end frame")] = 100,
) -> None:
    """Create an empty scene snapshot file."""
    from animgroups.config import load_config
    from animgroups.scene.memory import MemoryScene

    if scene_path.exists():
        raise _fail(f"{scene_path} already exists")
    tpf = load_config().ticks_per_frame
    scene = MemoryScene(ticks_per_frame=tpf, range_start=start * tpf, range_end=end * tpf)
    scene.save(scene_path)
    typer.echo(f"Created scene at {scene_path}")


@app.command("add-node")
def add_node(
    scene_path: ScenePath,
    name: Annotated[str, typer.Argument(help="Node name")],
    parent: Annotated[
        str | None,
        typer.Option("--parent", "-p", help="Parent node name (default: scene root)"),
    ] = None,
) -> None:
    """Add a node to the scene snapshot."""
    from animgroups.scene.memory import MemoryScene, SceneLoadError

    try:
        scene = MemoryScene.load(scene_path)
    except SceneLoadError as e:
        raise _fail(e) from None
    try:
        handle = scene.add_node(name, parent)
    except KeyError as e:
        raise _fail(e.args[0]) from None
    scene.save(scene_path)
    typer.echo(f"Added node '{name}' (handle {handle})")


@app.command("list")
def list_groups(scene_path: ScenePath) -> None:
    """List the animation groups stored in a scene."""
    scene, groups = _open_scene(scene_path)
    if not len(groups):
        typer.echo("No animation groups.")
        return
    for group in groups:
        names = []
        for handle in group.node_handles:
            info = scene.resolve_node_by_handle(handle)
            names.append(info.name if info else f"<missing {handle}>")
        typer.echo(f"{group}  [{group.key}]")
        if names:
            typer.echo(f"    nodes: {', '.join(names)}")


@app.command()
def add(
    scene_path: ScenePath,
    name: Annotated[str, typer.Argument(help="Animation group name")],
    start: Annotated[
        int | None, typer.Option("--start", "-s", help="Start frame (default: timeline start)"),
    ] = None,
    end: Annotated[
        int | None, typer.Option("--end", "-e", help="End frame (default: timeline end)"),
    ] = None,
    node: Annotated[
        list[str] | None, typer.Option("--node", "-n", help="Member node name (repeatable)"),
    ] = None,
) -> None:
    """Add an animation group and save it to the scene."""
    from animgroups.errors import AnimationGroupError

    scene, groups = _open_scene(scene_path)
    handles: list[int] = []
    for node_name in node or []:
        info = scene.resolve_node_by_name(node_name)
        if info is None:
            raise _fail(f"no node named '{node_name}'")
        handles.append(info.handle)

    group = groups.create(name)
    if start is not None:
        group.set_frame_start(start)
    if end is not None:
        group.set_frame_end(end)
    group.set_node_handles(handles)
    try:
        groups.save_to_store()
    except AnimationGroupError as e:
        raise _fail(e) from None
    scene.save(scene_path)
    typer.echo(f"Added {group}")


@app.command()
def remove(
    scene_path: ScenePath,
    group_ref: Annotated[str, typer.Argument(help="Group name or id")],
) -> None:
    """Remove an animation group from the scene."""
    from animgroups.errors import AnimationGroupError

    scene, groups = _open_scene(scene_path)
    group = groups.find(group_ref)
    if group is None:
        raise _fail(f"no animation group '{group_ref}'")
    groups.remove(group)
    try:
        groups.save_to_store()
    except AnimationGroupError as e:
        raise _fail(e) from None
    scene.save(scene_path)
    typer.echo(f"Removed {group}")


@app.command()
def export(
    scene_path: ScenePath,
    output: Annotated[Path, typer.Argument(help="Destination JSON file")],
) -> None:
    """Export the scene's animation groups to a portable JSON file."""
    from animgroups.errors import AnimationGroupError

    _, groups = _open_scene(scene_path)
    try:
        groups.export_to_portable(output)
    except (AnimationGroupError, OSError) as e:
        raise _fail(e) from None
    typer.echo(f"Exported {len(groups)} animation group(s) to {output}")


@app.command("import")
def import_(
    scene_path: ScenePath,
    source: Annotated[Path, typer.Argument(help="Portable JSON file to import")],
) -> None:
    """Replace the scene's animation groups with those of a portable JSON file."""
    from animgroups.errors import AnimationGroupError

    scene, groups = _open_scene(scene_path)
    try:
        report = groups.import_from_file(source)
    except (AnimationGroupError, OSError) as e:
        raise _fail(e) from None
    scene.save(scene_path)
    typer.echo(f"Imported {len(report.imported)} animation group(s)")
    for skip in report.skipped:
        typer.echo(f"  cleared members of '{skip.group_name}': '{skip.node_name}' {skip.reason}")


@app.callback(invoke_without_command=True)
def main(
    ctx: typer.Context,
    version: Annotated[
        bool, typer.Option("--version", "-v", help="Show version")
    ] = False,
    verbose: Annotated[
        bool, typer.Option("--verbose", help="Log progress to stderr")
    ] = False,
) -> None:
    """animgroups - animation group storage and portable sync."""
    if version:
        from animgroups import __version__

        typer.echo(f"animgroups {__version__}")
        raise typer.Exit()
    if verbose:
        import logging

        logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")
    if ctx.invoked_subcommand is None:
        typer.echo(ctx.get_help())
