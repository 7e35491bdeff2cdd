"""
retail_store
Stores en memoria (usuarios, productos, carritos) del backend de la tienda.
"""
