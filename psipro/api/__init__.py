"""HTTP API for PsiPro."""
