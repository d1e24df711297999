"""Query construction and similarity ranking shared by the DSL backends."""
