"""
Módulo de Documentos Fiscales

Importa el reporte de documentos electrónicos (facturas, notas crédito/débito)
exportado en Excel y lo guarda como registros inmutables.

FLUJO DE IMPORTACIÓN:
- Formato por extensión: .xlsx (openpyxl) o .xls (xlrd); solo la primera hoja
- Encabezado: 32 columnas fijas en orden, sin aceptación parcial
- Filas: cada columna se convierte por posición (texto, decimal, fecha)
- Una fila con error inesperado se descarta sin detener el lote
- Todas las filas aceptadas se guardan en una sola transacción

CONVENCIONES NUMÉRICAS:
- "1.234.567,89" -> 1234567.89 (punto de miles, coma decimal)
- Un valor que no se puede interpretar queda ausente (NULL), nunca cero

ROLES Y PERMISOS:
- ADMIN/USER: importar, listar y consultar documentos
"""
