"""Record store, auth and persistence for PsiPro."""
