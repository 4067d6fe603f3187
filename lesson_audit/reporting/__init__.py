"""Console rendering and file export of violation reports."""
