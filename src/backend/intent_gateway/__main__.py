from intent_gateway.main import run

run()
