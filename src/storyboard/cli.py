"""CLI entry point for the storyboard generator."""

import asyncio
import logging
import typer
from pathlib import Path
from typing import List, Optional

from . import __version__
from .config import config
from .models import GenerationState, Storyboard, demo_storyboard
from .studio import StoryboardSession, Studio
from .studio.quota import QUOTA_BANNER

app = typer.Typer(
    name="storyboard",
    help="AI storyboard generator: a still and an animated clip per scene",
    no_args_is_help=True
)

STATE_ICONS = {
    GenerationState.IDLE: "·",
    GenerationState.LOADING: "⏳",
    GenerationState.DONE: "✅",
    GenerationState.ERROR: "❌",
}

# Relative to config.workspace when no path is given
DEFAULT_SCRIPT = "storyboard.yaml"
DEFAULT_OUTPUT = "renders"


def setup_logging(verbose: bool = False) -> None:
    """Configure logging."""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(levelname)s: %(message)s",
    )


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        typer.echo(f"storyboard version {__version__}")
        raise typer.Exit()


def _in_workspace(path: Optional[Path], default: str) -> Path:
    return path if path is not None else config.workspace / default


def _preview(text: str, width: int = 70) -> str:
    return text[:width] + "..." if len(text) > width else text


def _load(script: Path) -> Storyboard:
    if not script.exists():
        typer.echo(f"❌ No storyboard found at {script}")
        typer.echo("   Run 'storyboard init' to create one")
        raise typer.Exit(1)
    try:
        return Storyboard.from_yaml(script)
    except Exception as e:
        typer.echo(f"❌ Error loading storyboard: {e}")
        raise typer.Exit(1)


@app.callback()
def main(
    version: Optional[bool] = typer.Option(
        None,
        "--version",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit"
    )
) -> None:
    """AI Storyboard - Craft your story, scene by scene."""
    pass


@app.command()
def init(
    output: Optional[Path] = typer.Option(
        None,
        "--output",
        "-o",
        help="Where to write the sample storyboard [default: $STORYBOARD_WORKSPACE/storyboard.yaml]"
    ),
    force: bool = typer.Option(
        False,
        "--force",
        "-f",
        help="Overwrite an existing file"
    ),
) -> None:
    """Write a sample three-scene storyboard to start from."""
    output = _in_workspace(output, DEFAULT_SCRIPT)
    if output.exists() and not force:
        typer.echo(f"❌ {output} already exists (use --force to overwrite)")
        raise typer.Exit(1)

    storyboard = demo_storyboard()
    output.parent.mkdir(parents=True, exist_ok=True)
    storyboard.to_yaml(output)
    typer.echo(f"✅ Storyboard saved: {output}")
    typer.echo(f"   Characters: {len(storyboard.characters)}")
    typer.echo(f"   Scenes: {len(storyboard.scenes)}")


@app.command()
def status(
    script: Optional[Path] = typer.Option(
        None,
        "--script",
        "-s",
        help="Path to storyboard YAML file [default: $STORYBOARD_WORKSPACE/storyboard.yaml]"
    )
) -> None:
    """Show the characters and scenes of a storyboard."""
    storyboard = _load(_in_workspace(script, DEFAULT_SCRIPT))
    session = StoryboardSession.from_storyboard(storyboard)

    typer.echo(f"📁 Storyboard: {storyboard.title}")

    typer.echo(f"\n🎭 Characters ({len(session.characters)}):")
    for character in session.characters:
        typer.echo(f"   • {character.name}")
        if character.description:
            typer.echo(f"     {_preview(character.description)}")

    typer.echo(f"\n📽️  Scenes ({len(session.scenes)}):")
    for scene in session.scenes:
        typer.echo(f"   SCENE {scene.scene_number}")
        typer.echo(f"      → {_preview(scene.scene_description) or '(no description)'}")
        if scene.animation_prompt:
            typer.echo(f"      ↻ {_preview(scene.animation_prompt)}")


async def _run_session(
    session: StoryboardSession,
    scene_numbers: List[int],
    animate: bool,
) -> None:
    async with Studio.from_config(session) as studio:
        if session.setup_error:
            return

        if scene_numbers:
            for number in scene_numbers:
                scene = next((s for s in session.scenes if s.scene_number == number), None)
                if scene is None:
                    typer.echo(f"⚠️  No scene {number}; skipping")
                    continue
                typer.echo(f"   Generating image for scene {number}...")
                await studio.generate_image(scene.id)
        else:
            typer.echo("   Generating images...")
            await studio.generate_all_images()

        if not animate:
            return

        wanted = set(scene_numbers)
        for scene in list(session.scenes):
            if wanted and scene.scene_number not in wanted:
                continue
            if scene.image_state == GenerationState.DONE:
                await studio.animate_scene(scene.id)

        if session.pollable_scenes():
            typer.echo(
                f"   Animating {len(session.pollable_scenes())} scene(s)... "
                "This can take a few minutes."
            )
            await studio.wait_for_videos()


@app.command()
def generate(
    script: Optional[Path] = typer.Option(
        None,
        "--script",
        "-s",
        help="Path to storyboard YAML file [default: $STORYBOARD_WORKSPACE/storyboard.yaml]"
    ),
    output: Optional[Path] = typer.Option(
        None,
        "--output",
        "-o",
        help="Output directory for stills and clips [default: $STORYBOARD_WORKSPACE/renders]"
    ),
    scene: Optional[List[int]] = typer.Option(
        None,
        "--scene",
        "-n",
        help="Scene number to (re)generate; repeat for several. Defaults to all idle scenes."
    ),
    animate: bool = typer.Option(
        False,
        "--animate",
        "-a",
        help="Animate every scene that has a still"
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Enable verbose logging"
    ),
) -> None:
    """Generate a still per scene with Imagen and, optionally, animate them with Veo."""
    setup_logging(verbose)
    output = _in_workspace(output, DEFAULT_OUTPUT)
    storyboard = _load(_in_workspace(script, DEFAULT_SCRIPT))
    session = StoryboardSession.from_storyboard(storyboard)

    typer.echo(f"🎬 Storyboard: {storyboard.title}")
    typer.echo(f"   Scenes: {len(session.scenes)}")
    typer.echo(f"   Characters: {len(session.characters)}")

    asyncio.run(_run_session(session, scene or [], animate))

    if session.setup_error:
        typer.echo(f"❌ {session.setup_error}")
        raise typer.Exit(1)

    output.mkdir(parents=True, exist_ok=True)
    failed = 0
    typer.echo(f"\n📽️  Scenes:")
    for item in session.scenes:
        icon = STATE_ICONS[item.image_state]
        line = f"   {icon} SCENE {item.scene_number}"
        if item.image_asset is not None:
            path = item.image_asset.save(output / f"scene_{item.scene_number:02d}.png")
            line += f" → {path}"
        if item.video_asset is not None:
            path = item.video_asset.save(output / f"scene_{item.scene_number:02d}.mp4")
            line += f" + {path}"
        typer.echo(line)
        if GenerationState.ERROR in (item.image_state, item.video_state):
            failed += 1
            typer.echo(f"      {item.last_error_message}")

    if session.quota_exceeded:
        typer.echo(f"\n⛔ {QUOTA_BANNER}")
        raise typer.Exit(1)

    if failed > 0:
        typer.echo(f"\n⚠️  {failed} scene(s) failed")
        raise typer.Exit(1)

    typer.echo(f"\n✅ Output saved to {output}")


if __name__ == "__main__":
    app()
