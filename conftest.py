# Projektwurzel für die Tests importierbar machen (opac, utils, main)
