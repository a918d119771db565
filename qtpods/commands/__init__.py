# Command modules for qtpods CLI
