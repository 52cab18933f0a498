"""mirrorsync - one-way directory mirroring with concurrent copy workers."""

__version__ = "0.1.0"
