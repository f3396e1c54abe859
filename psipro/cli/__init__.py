"""Command line interface for PsiPro."""
