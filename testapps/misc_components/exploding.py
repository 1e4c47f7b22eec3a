raise RuntimeError("exploded during import")
