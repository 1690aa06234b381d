"""
Configuration for crease pattern synthesis.

Defines the grid pitch, the comparison tolerance and the ceilings for every
bounded search loop. A single frozen value is passed to every stage.
"""

from dataclasses import dataclass, replace
import json
from pathlib import Path


@dataclass(frozen=True)
class PleatConfig:
    """
    Configuration for box-pleat crease pattern generation.

    Attributes:
        pitch: Grid pitch; vertices and folds lie on multiples of it
        epsilon: Tolerance for the few floating point comparisons
        max_iterations: Ceiling for each rectangle growth / ray search loop
        max_nodes: Ceiling for the number of decomposition nodes per run
        start_with_valley: First half-pitch run of every fold line is a valley
    """
    # Grid
    pitch: int = 20  # same spacing as the drawing canvas grid

    # Numerics
    epsilon: float = 1e-9

    # Search ceilings
    max_iterations: int = 20  # rectangle growth steps per decomposition
    max_nodes: int = 256  # ThreePart nodes per run

    # Fold assignment
    start_with_valley: bool = True

    def validate(self) -> list[str]:
        """
        Validate configuration values.

        Returns:
            List of error messages (empty if valid)
        """
        errors = []

        if not isinstance(self.pitch, int) or isinstance(self.pitch, bool):
            errors.append(f"pitch must be an integer, got {self.pitch!r}")
        elif self.pitch <= 0:
            errors.append(f"pitch must be positive, got {self.pitch}")

        if self.epsilon <= 0:
            errors.append(f"epsilon must be positive, got {self.epsilon}")

        if self.max_iterations < 1:
            errors.append(f"max_iterations must be >= 1, got {self.max_iterations}")

        if self.max_nodes < 1:
            errors.append(f"max_nodes must be >= 1, got {self.max_nodes}")

        return errors

    @property
    def half_pitch(self) -> float:
        """Length of one fold run."""
        return self.pitch / 2

    def with_pitch(self, pitch: int) -> "PleatConfig":
        """Return a copy using another grid pitch."""
        return replace(self, pitch=pitch)

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization."""
        return {
            "pitch": self.pitch,
            "epsilon": self.epsilon,
            "max_iterations": self.max_iterations,
            "max_nodes": self.max_nodes,
            "start_with_valley": self.start_with_valley,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "PleatConfig":
        """Create from dictionary."""
        return cls(
            pitch=int(data.get("pitch", 20)),
            epsilon=data.get("epsilon", 1e-9),
            max_iterations=data.get("max_iterations", 20),
            max_nodes=data.get("max_nodes", 256),
            start_with_valley=data.get("start_with_valley", True),
        )

    def save(self, filepath: Path | str) -> None:
        """Save configuration to JSON file."""
        filepath = Path(filepath)
        with open(filepath, 'w') as f:
            json.dump(self.to_dict(), f, indent=2)

    @classmethod
    def load(cls, filepath: Path | str) -> "PleatConfig":
        """Load configuration from JSON file."""
        filepath = Path(filepath)
        if not filepath.exists():
            return cls()  # Return defaults if file doesn't exist

        with open(filepath, 'r') as f:
            data = json.load(f)
        return cls.from_dict(data)

    @classmethod
    def load_for_polygon(cls, polygon_filepath: Path | str) -> "PleatConfig":
        """
        Load configuration for a specific polygon file.

        Looks for <name>.pleat_config.json next to the polygon file.
        Returns defaults if config file doesn't exist.
        """
        polygon_path = Path(polygon_filepath)
        config_path = polygon_path.with_suffix('.pleat_config.json')
        return cls.load(config_path)

    def save_for_polygon(self, polygon_filepath: Path | str) -> None:
        """
        Save configuration for a specific polygon file.

        Saves as <name>.pleat_config.json next to the polygon file.
        """
        polygon_path = Path(polygon_filepath)
        config_path = polygon_path.with_suffix('.pleat_config.json')
        self.save(config_path)


# Common grid pitches
PITCH_PRESETS = {
    "canvas": 20,   # Drawing canvas grid
    "fine": 10,
    "coarse": 40,
}
