from gemini_web_search.main import run

run()
