"""Command-line interface for Chord Engine.

Provides commands for:
- analyze: Chord timeline, key and tempo of an audio file
- info: Show audio file information
"""

import logging
import time
from contextlib import contextmanager
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, Dict

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

app = typer.Typer(
    name="chord-engine",
    help="Audio to chord timeline analysis",
    rich_markup_mode="markdown",
)
console = Console()


@dataclass
class StageTimings:
    """Wall-clock seconds per CLI stage."""

    stages: Dict[str, float] = field(default_factory=dict)

    @contextmanager
    def measure(self, stage: str):
        start = time.perf_counter()
        try:
            yield
        finally:
            self.stages[stage] = time.perf_counter() - start

    def print_summary(self) -> None:
        console.print("\n[bold]Timing Summary:[/bold]")
        for stage, duration in self.stages.items():
            console.print(f"  {stage}: {duration:.2f}s")


def _setup_logging(verbose: bool) -> None:
    """Route library logging through rich when verbose."""
    if not verbose:
        return
    logging.basicConfig(
        level=logging.DEBUG,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, rich_tracebacks=True)],
        force=True,
    )


def _load_waveform(input_file: Path, tempo: Optional[float] = None):
    """Load audio through AudioLoader, reporting failures the CLI way."""
    from .input import AudioLoader

    loader = AudioLoader()
    try:
        return loader.load_waveform(str(input_file), tempo=tempo)
    except FileNotFoundError:
        console.print(f"[red]Error: File not found: {input_file}[/red]")
        raise typer.Exit(1)
    except ValueError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1)


@app.command()
def analyze(
    input_file: Path = typer.Argument(..., help="Input audio file (WAV, MP3, FLAC, ...)"),
    mode: str = typer.Option(
        "balanced", "--mode", "-m", help="Analysis mode: fast, balanced, accurate"
    ),
    tempo: Optional[float] = typer.Option(
        None, "--tempo", "-t", help="Known tempo in BPM (estimated if omitted)"
    ),
    key_profile: str = typer.Option(
        "krumhansl", "--key-profile", help="Key profile: krumhansl, temperley"
    ),
    midi: Optional[Path] = typer.Option(
        None, "--midi", help="Export chords to a MIDI file"
    ),
    lab: Optional[Path] = typer.Option(
        None, "--lab", help="Export chords to a .lab file"
    ),
    json_output: bool = typer.Option(
        False, "--json", help="Output results as JSON (for scripting)"
    ),
    verbose: bool = typer.Option(
        False, "--verbose", "-v", help="Show stage logging and timings"
    ),
):
    """Detect the chord timeline, key and tempo of an audio file.

    Examples:
        chord-engine analyze song.wav
        chord-engine analyze song.wav --mode accurate --midi chords.mid
    """
    from .pipeline import ChordPipeline, AnalysisConfig
    from .output import ChordMIDIExporter, LabExporter

    _setup_logging(verbose)
    timings = StageTimings()

    if not input_file.exists():
        console.print(f"[red]Error: File not found: {input_file}[/red]")
        raise typer.Exit(1)

    if not json_output:
        console.print(f"\n[bold blue]Chord Analysis: {input_file.name}[/bold blue]\n")

    with timings.measure("Loading"):
        waveform = _load_waveform(input_file, tempo)

    try:
        with timings.measure("Analysis"):
            pipeline = ChordPipeline(AnalysisConfig(key_profile=key_profile))
            result = pipeline.run(waveform, mode=mode)
    except ValueError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1)

    if midi or lab:
        with timings.measure("Export"):
            if midi:
                ChordMIDIExporter(tempo=result.bpm).export(
                    result.timeline, str(midi), end_time=result.duration
                )
            if lab:
                LabExporter().export(result.timeline, str(lab), end_time=result.duration)

    if json_output:
        data = result.to_dict()
        data["input"] = str(input_file)
        if midi:
            data["midi"] = str(midi)
        if lab:
            data["lab"] = str(lab)
        if verbose:
            data["timings"] = timings.stages
        console.print_json(data=data)
        return

    console.print(f"  Duration: {result.duration:.2f}s")
    console.print(f"  Tempo: {result.bpm:.0f} BPM")
    console.print(f"  [green]Key: {result.key.name}[/green]")

    if len(result.timeline):
        _show_chords_table(result.timeline, result.duration)
    else:
        console.print("[yellow]No chords detected![/yellow]")

    if midi:
        console.print(f"[blue]MIDI written to:[/blue] {midi}")
    if lab:
        console.print(f"[blue]Lab written to:[/blue] {lab}")

    console.print("\n[green][OK] Analysis complete![/green]")
    if verbose:
        timings.print_summary()


@app.command()
def info(
    input_file: Path = typer.Argument(..., help="Input audio file"),
):
    """Show information about an audio file."""
    from .analysis import FeatureExtractor, TempoAnalyzer
    from .inference import KeyEstimator

    if not input_file.exists():
        console.print(f"[red]Error: File not found: {input_file}[/red]")
        raise typer.Exit(1)

    waveform = _load_waveform(input_file)

    console.print(f"\n[bold]Audio Info:[/bold] {input_file.name}")
    console.print(f"  Duration: {waveform.duration:.2f} seconds")
    console.print(f"  Sample rate: {waveform.sample_rate} Hz")
    console.print(f"  Samples: {len(waveform):,}")

    tempo = TempoAnalyzer().estimate(waveform)
    console.print(f"  Estimated tempo: {tempo:.0f} BPM")

    features = FeatureExtractor().extract(waveform)
    key = KeyEstimator().estimate(features)
    console.print(f"  Estimated key: {key.name} (score: {key.score:.2f})")


def _show_chords_table(timeline, end_time):
    """Display chords in a table."""
    table = Table(title="Detected Chords")
    table.add_column("Time", style="yellow")
    table.add_column("Chord", style="cyan")
    table.add_column("Duration (s)", style="green")
    table.add_column("Role", style="magenta")

    for event, duration in zip(timeline, timeline.durations(end_time)):
        table.add_row(
            f"{event.time:.2f}s",
            event.label,
            f"{duration:.2f}",
            event.ornament_type.value,
        )

    console.print(table)


def main():
    """Entry point."""
    app()


if __name__ == "__main__":
    main()
