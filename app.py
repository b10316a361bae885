# app.py
"""
Entrypoint da aplicação.

Uso:
  python app.py migrate --db suprimentos.db
  python app.py params show
  python app.py --log lote proximos --janela 15
  python app.py rel validade --export validade.xlsx
  python app.py importar lotes lotes.xlsx
"""

from suprimentos.adapters.cli import main

if __name__ == "__main__":
    main()
