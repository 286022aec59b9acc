"""Pipeline stages, one module per stage. Importing a module registers its stage."""
