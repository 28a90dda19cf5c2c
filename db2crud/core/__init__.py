"""Discovery, resolution, loading and rendering pipeline."""
