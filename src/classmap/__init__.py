"""classmap: class-relationship graphs and PlantUML class diagrams."""

__version__ = "0.1.0"
