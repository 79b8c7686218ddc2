"""File systems, sectors, partitions, partition tables, usage probes, commands and resize planning for OS installers."""

__version__ = "0.1.0"