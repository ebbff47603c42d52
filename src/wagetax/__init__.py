"""WageTax: German wage-tax calculation backend."""
