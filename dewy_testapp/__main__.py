"""Allow `python -m dewy_testapp`."""

from dewy_testapp.main import main

main()
