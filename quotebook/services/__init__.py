# Business services: numbering, pricing, documents, catalogs, rendering
