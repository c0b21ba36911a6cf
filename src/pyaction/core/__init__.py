"""Node tree, manifest and result types shared by the analysis."""
