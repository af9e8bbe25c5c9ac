from django.urls import path
from . import views

urlpatterns = [
    path('reports/material-costs/', views.material_cost_analysis, name='material-cost-analysis'),
    path('reports/material-costs/by-category/', views.material_cost_by_category, name='material-cost-by-category'),
    path('reports/material-costs/trends/', views.material_cost_trends, name='material-cost-trends'),
    path('reports/material-costs/top-materials/', views.top_materials, name='top-materials'),
    path('reports/waste-impact/', views.waste_cost_impact, name='waste-cost-impact'),
    path('dashboard/summary/', views.dashboard_summary, name='dashboard-summary'),
]
