"""Host display surfaces (console, terminal, Matrix)."""
