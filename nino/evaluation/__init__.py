from nino.evaluation.evaluator import evaluate, evaluate0, interpret, run
